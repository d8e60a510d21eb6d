"""
Deterministic conversion rules.

This file exists to make the fixed constants of the pipeline explicit.
"""

# Delimiter candidates in tie-break preference order
CANDIDATE_DELIMITERS = (",", ";", "\t", "|")
DEFAULT_DELIMITER = ","

BOM_CHAR = "\ufeff"
UTF8_BOM = b"\xef\xbb\xbf"
UTF16_LE_BOM = b"\xff\xfe"
UTF16_BE_BOM = b"\xfe\xff"

# Largest integer a JSON consumer can hold without precision loss
MAX_SAFE_INTEGER = 2**53 - 1
MAX_SAFE_INTEGER_DIGITS = len(str(MAX_SAFE_INTEGER))

DEFAULT_PRETTY = 2
DEFAULT_ARRAY_FIELDS = (
    "Quote Line Items",
    "Quote Line Items 2",
    "Openings",
    "Openings 2",
    "Openings 3",
    "Openings 4",
    "Hardware Set",
    "Hardware Sets",
    "Components",
    "Items",
    "Item Ids",
    "Quote Line Item Ids",
)

CSV_SUFFIX = ".csv"
JSON_SUFFIX = ".json"
NDJSON_SUFFIX = ".ndjson"
OUTPUT_DIR_SUFFIX = "-json"
