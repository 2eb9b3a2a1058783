from __future__ import annotations

from ..models import HarnessMode, NetworkEndpoints
from ..process import ProcessInvoker
from ..profiles import ProfileStore
from ..rest_client import NodeRestClient
from ..workspace import SessionContext
from .base import ModeAdapter
from .live import LiveAdapter
from .simulation import ForkedSimulationAdapter, SimulationAdapter


_ADAPTERS: dict[HarnessMode, type[ModeAdapter]] = {
    HarnessMode.LOCAL_SIMULATION: SimulationAdapter,
    HarnessMode.FORKED_SIMULATION: ForkedSimulationAdapter,
    HarnessMode.LIVE: LiveAdapter,
}


def build_mode_adapter(
    mode: HarnessMode,
    *,
    invoker: ProcessInvoker,
    session: SessionContext,
    network: NetworkEndpoints,
    profiles: ProfileStore,
    rest_client: NodeRestClient | None = None,
) -> ModeAdapter:
    adapter_cls = _ADAPTERS[mode]
    kwargs = {"invoker": invoker, "session": session, "network": network, "profiles": profiles}
    if adapter_cls is LiveAdapter:
        return LiveAdapter(rest_client=rest_client, **kwargs)
    return adapter_cls(**kwargs)


__all__ = [
    "ForkedSimulationAdapter",
    "LiveAdapter",
    "ModeAdapter",
    "SimulationAdapter",
    "build_mode_adapter",
]
