"""Native functions registered into every global frame."""

from __future__ import annotations

import time
from typing import List

from .runtime import Frame, LoxNumber, LoxValue, register_native

@register_native("clock", arity=0)
def native_clock(_frame: Frame, _args: List[LoxValue]) -> LoxNumber:
    return LoxNumber(time.time())
