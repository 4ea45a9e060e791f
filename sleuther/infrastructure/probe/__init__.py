from .ftp import FtpProber
from .http import HttpProber, parse_retry_after
from .router import SchemeProber

__all__ = ["FtpProber", "HttpProber", "SchemeProber", "parse_retry_after"]
