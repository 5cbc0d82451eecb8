# caller_utils.py
import sys


def caller_name(depth=1):
    """
    Returns the name of the function `depth` frames above the one calling
    caller_name(), e.g. 'DailyRotateFile.write'. Empty string when the stack
    isn't that deep.
    """
    try:
        frame = sys._getframe(depth + 1)
    except ValueError:
        return ""
    code = frame.f_code
    return getattr(code, 'co_qualname', code.co_name)
