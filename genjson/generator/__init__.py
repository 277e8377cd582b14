"""genjson JSON codec generator."""

from .config import GeneratorConfig as GeneratorConfig
from .errors import *
from .pipeline import GenerationResult as GenerationResult
from .pipeline import generate as generate
from .pipeline import generate_from_symbols as generate_from_symbols
from .pipeline import write_output as write_output
from .planner import GenerationFailure as GenerationFailure
from .planner import plan_models as plan_models
from .resolver import TypeResolver as TypeResolver
from .scanner import scan as scan
from .scanner import scan_source as scan_source
from .symbols import SymbolTable as SymbolTable
from .types import *
