from __future__ import annotations
import inspect
from typing import Any, Callable, List, Sequence, TYPE_CHECKING

from .errors import InjectContractError
from .types import fields_of, is_struct_like

if TYPE_CHECKING:
    from .interfaces import TypeMapper

"""
──────────────────────────────────────────────────────────────────────────────
Field Population & Invocation
──────────────────────────────────────────────────────────────────────────────
Purpose:
    Fill the fields of an instance, or the parameters of a callable, from a
    TypeMapper (normally an Injector).

Field rules (tag name `tag`):
    - bare marker      Annotated[T, Tag()]           → mapper.get(T)
    - tag value        Annotated[T, Tag("password")] → mapper.get_tag("password")
    - no annotation    T                             → mapper.get(T),
                                                       skipped when tag_required

Parameter rules:
    - position < len(tags) → mapper.get_tag(tags[position])
    - otherwise            → mapper.get(declared type)

Both abort on the first lookup error. Fields set before the failure keep
their new values; the callable is never called with a partial argument list.

Example:
    class ParentService:
        users: UsersRepo
        secret: Annotated[str, Tag("secret")]

    svc = ParentService()
    apply_fields(injector, svc, "inject")
"""

_RESOLVABLE = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)


def apply_fields(mapper: "TypeMapper", obj: Any, tag: str, *, tag_required: bool = False) -> None:
    """
    Set every injectable field of `obj` from `mapper`.
    Does nothing for values without declared fields (see types.is_struct_like).
    """
    if not is_struct_like(obj):
        return
    for spec in fields_of(type(obj)):
        annotated, value = spec.tag(tag)
        if annotated and value:
            instance = mapper.get_tag(value)
        elif annotated or not tag_required:
            instance = mapper.get(spec.type_)
        else:
            continue
        setattr(obj, spec.name, instance)


def _parameters(fn: Callable[..., Any]) -> List[inspect.Parameter]:
    sig = inspect.signature(fn, eval_str=True)
    return [p for p in sig.parameters.values() if p.kind in _RESOLVABLE]


def invoke_with(mapper: "TypeMapper", fn: Any, tags: Sequence[str] = ()) -> Any:
    """Resolve the parameters of `fn` and call it, returning its result as is."""
    if not callable(fn):
        raise InjectContractError(f"Cannot invoke non-callable {fn!r}")
    for t in tags:
        if not isinstance(t, str):
            raise InjectContractError(f"Tags must be strings, got {t!r}")

    params = _parameters(fn)
    tags = list(tags)[: len(params)]  # extra tags are ignored

    args: List[Any] = []
    kwargs = {}
    for pos, param in enumerate(params):
        if pos < len(tags):
            value = mapper.get_tag(tags[pos])
        else:
            declared = Any if param.annotation is inspect.Parameter.empty else param.annotation
            value = mapper.get(declared)
        if param.kind is inspect.Parameter.KEYWORD_ONLY:
            kwargs[param.name] = value
        else:
            args.append(value)

    return fn(*args, **kwargs)
