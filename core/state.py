from enum import Enum, IntEnum


class Outcome(str, Enum):
    ALLOWED = "ALLOWED"
    FORCED = "FORCED"


class ExitCode(IntEnum):
    OK = 0
    FAILURE = 1
