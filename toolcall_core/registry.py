# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolcall: Text-based function calling for any LLM.
# Copyright (C) 2025 FunnyCups (https://github.com/funnycups)

"""
Function registry: name to AgentFunction lookup.
"""

import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from .exceptions import DuplicateFunctionError
from .models import AgentFunction

logger = logging.getLogger(__name__)


class FunctionRegistry:
    """
    Holds the functions the model may call.

    Names are unique; registering a second function under an existing name
    raises DuplicateFunctionError. Iteration follows registration order.
    """

    def __init__(self, functions: Optional[Iterable[AgentFunction]] = None):
        self._functions: Dict[str, AgentFunction] = {}
        for func in functions or []:
            self.register(func)

    def register(self, func: AgentFunction) -> AgentFunction:
        if func.name in self._functions:
            raise DuplicateFunctionError(func.name)
        self._functions[func.name] = func
        binding = "local" if func.is_local else "remote"
        logger.debug(f"🔧 Registered function '{func.name}' ({binding})")
        return func

    def register_local(self, name: str, executor: Callable[..., Any], description: str = "",
                       parameters: Optional[Dict[str, Any]] = None) -> AgentFunction:
        return self.register(AgentFunction.local(name, executor, description, parameters))

    def register_remote(self, name: str, description: str = "",
                        parameters: Optional[Dict[str, Any]] = None) -> AgentFunction:
        return self.register(AgentFunction.remote(name, description, parameters))

    def get(self, name: str) -> Optional[AgentFunction]:
        """Return the function registered under ``name``, or None."""
        return self._functions.get(name)

    def names(self) -> List[str]:
        return list(self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[AgentFunction]:
        return iter(list(self._functions.values()))

    def __len__(self) -> int:
        return len(self._functions)
