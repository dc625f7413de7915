"""Compiler core: schema model in, declaration tree out.

May import from the domain layer only. Single-pass and synchronous; all
accumulator state belongs to one :class:`~cdpgen.compiler.emitter.Compilation`.
"""

from cdpgen.compiler.emitter import Compilation, compile_protocol

__all__ = ["Compilation", "compile_protocol"]
