## stalog — Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘

import lark


__all__ = [
    "StalogError", "StalogParseError", "StalogIncompleteParse", "StalogNameError", "StalogValueError",
    "StalogContractError", "StalogEvalError", "InvalidSymbolIndex", "InsufficientStack", "InvalidWindowIndex",
    "StalogModuleError",
]


class StalogError(Exception):
    def __init__(self, message: str = "", *, stalog_instruction=None, stalog_token=None, stalog_meta=None):
        """Base class for all stalog-raised errors."""
        super().__init__(message)
        self.stalog_instruction: object = stalog_instruction
        self.stalog_token: str = stalog_token
        self.stalog_meta: dict = stalog_meta

class StalogParseError(StalogError):
    def __init__(self, message, *, filename=None, line=None, column=None, token=None):
        super().__init__(message)
        self.filename = filename
        self.line = line
        self.column = column
        self.token = token

class StalogIncompleteParse(StalogParseError, lark.exceptions.ParseError):
    def __init__(self, message, *, filename=None, line=None, column=None, token=None):
        super().__init__(message, filename=filename, line=line, column=column, token=token)

class StalogNameError(StalogError, NameError):
    pass

class StalogValueError(StalogError, ValueError):
    pass


class StalogContractError(StalogError, AssertionError):
    """Instruction outside the known variants reached the evaluator; a producer bug, never recoverable."""
    pass


class StalogEvalError(StalogError, IndexError):
    """Instruction rejected by the evaluator; stack and log are left exactly as they were."""
    def __init__(self, message: str = "", *, stalog_instruction=None, stalog_token=None, stalog_meta=None, stalog_stack=None):
        super().__init__(message, stalog_instruction=stalog_instruction, stalog_token=stalog_token, stalog_meta=stalog_meta)
        self.stalog_stack = stalog_stack

class InvalidSymbolIndex(StalogEvalError):
    def __init__(self, index: int, table_size: int, **kwargs):
        super().__init__(f"Symbol index {index} is outside the symbol table of size {table_size}.", **kwargs)
        self.index = index
        self.table_size = table_size

class InsufficientStack(StalogEvalError):
    def __init__(self, requested: int, size: int, **kwargs):
        super().__init__(f"Cannot permute top {requested} elements of stack with size {size}.", **kwargs)
        self.requested = requested
        self.size = size

class InvalidWindowIndex(StalogEvalError):
    def __init__(self, index: int, pop: int, **kwargs):
        if pop < 0:
            message = f"Window size {pop} must not be negative."
        else:
            message = f"Window index {index} is outside the popped window of size {pop}."
        super().__init__(message, **kwargs)
        self.index = index
        self.pop = pop


class StalogModuleError(StalogError, ImportError):
    def __init__(self, message, *, stalog_token=None, filename=None, stalog_meta=None):
        super().__init__(message, stalog_token=stalog_token, stalog_meta=stalog_meta)
        self.filename = filename
