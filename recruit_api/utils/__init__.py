"""Utility modules."""
from recruit_api.utils.cpf import is_valid_cpf, mask_email, normalize_cpf
from recruit_api.utils.errors import ErrorKind, Result, ServiceError, raise_for_error, unwrap
from recruit_api.utils.file_utils import get_file_size, safe_child_path, save_stream
from recruit_api.utils.json_utils import json_dump, json_load, load_dict, load_list, load_str_list
from recruit_api.utils.security import (
    generate_numeric_code,
    generate_refresh_token,
    hash_code,
    verify_code,
)
from recruit_api.utils.time_utils import Clock, SystemClock, ceil_minutes

__all__ = [
    "is_valid_cpf",
    "mask_email",
    "normalize_cpf",
    "ErrorKind",
    "Result",
    "ServiceError",
    "raise_for_error",
    "unwrap",
    "get_file_size",
    "safe_child_path",
    "save_stream",
    "json_dump",
    "json_load",
    "load_dict",
    "load_list",
    "load_str_list",
    "hash_code",
    "verify_code",
    "generate_numeric_code",
    "generate_refresh_token",
    "Clock",
    "SystemClock",
    "ceil_minutes",
]
