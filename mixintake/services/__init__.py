"""Business services"""

from .mix_derivation import DerivedMixValues, derive_from_mass, derive_from_ratio
from .record_id_allocator import RecordIdAllocator, next_record_id

__all__ = [
    "DerivedMixValues",
    "derive_from_mass",
    "derive_from_ratio",
    "RecordIdAllocator",
    "next_record_id",
]
