import inspect
import typing


def invoke(c: typing.Callable, **provided_kwargs):
    "Call c with only those of the provided keyword arguments that its signature accepts."
    sig = inspect.signature(c)
    if any(p.kind is inspect.Parameter.VAR_KEYWORD for p in sig.parameters.values()):
        return c(**provided_kwargs)
    used_kwargs = {k: v for k, v in provided_kwargs.items() if k in sig.parameters}
    return c(**used_kwargs)


async def invoke_awaiting(c: typing.Callable, **provided_kwargs):
    result = invoke(c, **provided_kwargs)
    if inspect.isawaitable(result):
        return await result
    return result
