"""highlights/ — Extraction of reading annotations from KOReader sidecar files."""

from highlights.lua_parser import parse_lua, parse_lua_file

__all__ = ["parse_lua", "parse_lua_file"]
