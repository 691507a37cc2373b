"""Registry of calendar functions exposed through the local API.

Each registered function gets a pydantic arguments model derived from its
signature; the model provides the published JSON schema and validates
incoming arguments before the call.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Type

from pydantic import BaseModel, ConfigDict, create_model

JsonSchema = Dict[str, Any]


def _arguments_model(name: str, signature: inspect.Signature) -> Type[BaseModel]:
    fields: Dict[str, Any] = {}
    for param in signature.parameters.values():
        annotation = Any if param.annotation is inspect.Parameter.empty else param.annotation
        default = ... if param.default is inspect.Parameter.empty else param.default
        fields[param.name] = (annotation, default)
    return create_model(
        f"{name.title().replace('_', '')}Arguments",
        __config__=ConfigDict(extra="forbid"),
        **fields,
    )


@dataclass(frozen=True)
class ApiFunction:
    name: str
    func: Callable[..., Any]
    description: str
    category: str
    tags: tuple[str, ...]
    arguments: Type[BaseModel]

    @property
    def parameter_schema(self) -> JsonSchema:
        schema = self.arguments.model_json_schema()
        schema.pop("title", None)
        for prop in schema.get("properties", {}).values():
            prop.pop("title", None)
        return schema

    def bind(self, **kwargs: Any) -> Dict[str, Any]:
        """Validate ``kwargs``; raises ``pydantic.ValidationError`` on bad input."""

        validated = self.arguments.model_validate(kwargs)
        return {field: getattr(validated, field) for field in self.arguments.model_fields}


REGISTRY: Dict[str, ApiFunction] = {}


def register_api(
    name: str,
    *,
    description: str,
    category: str,
    tags: Optional[Iterable[str]] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if name in REGISTRY:
            raise ValueError(f"API function '{name}' is already registered.")
        signature = inspect.signature(func, eval_str=True)
        REGISTRY[name] = ApiFunction(
            name=name,
            func=func,
            description=description,
            category=category,
            tags=tuple(tags or ()),
            arguments=_arguments_model(name, signature),
        )
        return func

    return decorator


def get_api_functions() -> List[ApiFunction]:
    return list(REGISTRY.values())


async def call_api(name: str, **kwargs: Any) -> Any:
    if name not in REGISTRY:
        raise KeyError(f"API function '{name}' is not registered.")
    api_function = REGISTRY[name]
    result = api_function.func(**api_function.bind(**kwargs))
    if inspect.isawaitable(result):
        result = await result
    return result
