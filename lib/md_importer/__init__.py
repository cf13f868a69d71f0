from md_importer.importer import StatblockImporter, prepare_import, run_import
from md_importer.statblock_parser import parse_statblock, validate_creature


__all__ = [
    "StatblockImporter",
    "parse_statblock",
    "prepare_import",
    "run_import",
    "validate_creature",
]
