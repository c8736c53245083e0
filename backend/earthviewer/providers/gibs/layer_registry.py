from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from earthviewer.providers.gibs.tiles import GIBS_LAYERS, TileLayer


class LayerRegistry:
    """Simple in-memory registry of imagery layers offered in the layer selector."""

    def __init__(self, layers: Optional[Iterable[TileLayer]] = None) -> None:
        self._layers: Dict[str, TileLayer] = {}
        for layer in layers or ():
            self.register(layer)

    @classmethod
    def default(cls) -> "LayerRegistry":
        return cls(GIBS_LAYERS)

    def register(self, layer: TileLayer) -> None:
        if layer.id in self._layers:
            raise ValueError(f"Layer '{layer.id}' already registered")
        self._layers[layer.id] = layer

    def get(self, layer_id: str) -> TileLayer:
        try:
            return self._layers[layer_id]
        except KeyError as exc:
            raise KeyError(f"Layer '{layer_id}' is not registered") from exc

    def list(self) -> List[TileLayer]:
        return list(self._layers.values())
