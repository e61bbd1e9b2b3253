"""Errors raised by the depth conversion pipeline.

Each one is scoped to a single synchronized tuple: the node logs it, drops
the tuple and keeps running.
"""

class DepthProcError(Exception):
    """Base exception for depth_proc"""
    pass

class UnsupportedEncoding(DepthProcError):
    """Raised when a depth or intensity encoding is not recognized"""

    def __init__(self, encoding: str, role: str = "image"):
        super().__init__(f"{role} has unsupported encoding [{encoding}]")
        self.encoding = encoding
        self.role = role

class CompanionConversionFailed(DepthProcError):
    """Raised when resizing or colour-converting the intensity image fails"""
    pass

class InvalidFrame(DepthProcError):
    """Raised when an image buffer does not match its declared geometry"""
    pass

class InvalidCalibration(DepthProcError):
    """Raised when camera info cannot be used for projection"""
    pass

class ConfigurationError(DepthProcError):
    """Raised when configuration is invalid"""
    pass
