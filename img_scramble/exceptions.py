class ScrambleException(Exception):
    """Base class for all errors raised by img_scramble"""
    pass


class PreconditionError(ScrambleException, ValueError):
    """Exception to be thrown when image dimensions or block level are unusable"""
    pass


class DecodeError(ScrambleException):
    """Exception to be thrown when image can't be loaded or decoded"""
    pass


class SchemeException(ScrambleException):
    """Exception to be thrown when wrong scrambling scheme is selected"""
    pass


class ImageLocatorException(ScrambleException):
    """Exception to be thrown when image locator is invalid"""
    pass
