"""Errors that abort a rearrange run before anything is written."""


class RearrangeError(Exception):
    """Base class; ``str(err)`` is the message shown to the operator."""


class InsufficientDataError(RearrangeError):
    def __init__(self, message: str = "The active sheet does not contain enough data."):
        super().__init__(message)


class LayoutError(RearrangeError):
    pass


class EmptyResultError(RearrangeError):
    def __init__(self, message: str = "No valid data rows found to process."):
        super().__init__(message)


class SheetNotFoundError(RearrangeError):
    def __init__(self, sheet_name: str):
        super().__init__(f'The workbook does not contain a sheet named "{sheet_name}".')
        self.sheet_name = sheet_name


class WorkbookError(RearrangeError):
    pass
