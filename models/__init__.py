from models.block import Block
from models.classroom import Classroom, default_classroom_name
from models.session import Session
from models.settings import Settings
from models.snapshot import Snapshot
from models.outcome import FieldOutcome, OutcomeStatus, WriteReport

__all__ = [
    "Block",
    "Classroom",
    "default_classroom_name",
    "Session",
    "Settings",
    "Snapshot",
    "FieldOutcome",
    "OutcomeStatus",
    "WriteReport",
]
