from .compiler import ConversionResult, HamlCompiler, TranspileOptions, convert, transpile
from .errors import HamlConfigError, HamlError, HamlStructuralError
from .formatter import format_html
from .tags import SELF_CLOSING_TAGS, TagSpec, parse_tag_line

__all__ = [
    'ConversionResult', 'HamlCompiler', 'TranspileOptions', 'convert', 'transpile',
    'HamlConfigError', 'HamlError', 'HamlStructuralError',
    'format_html', 'SELF_CLOSING_TAGS', 'TagSpec', 'parse_tag_line',
]
