"""
Engine configuration.

An engine can be described by a YAML file instead of constructor arguments:

    engine:
      n: 1024
      implementation: cooley_tukey
      window: hann
      allocator: boxed
      element: complex
      precision: f64

Missing keys take the defaults below; ``allocator`` and ``precision`` fall
back to the FFT_ENGINE_ALLOCATOR / FFT_ENGINE_PRECISION environment settings.
"""

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Dict, Optional, Union

import yaml

from .engine import Engine
from .numeric import COMPLEX


@dataclass
class EngineConfig:
    """Composition parameters of one Engine."""
    n: int
    implementation: str = 'cooley_tukey'
    window: str = 'rect'
    allocator: Optional[str] = None
    element: str = COMPLEX
    precision: Optional[str] = None
    cache_twiddles: Optional[bool] = None

    @classmethod
    def from_dict(cls, config: Dict) -> 'EngineConfig':
        if not isinstance(config, dict):
            raise ValueError(f"Engine config must be a mapping, got {type(config).__name__}")

        known = {f.name for f in fields(cls)}
        unknown = set(config) - known
        if unknown:
            raise ValueError(f"Unknown engine config keys: {sorted(unknown)}")
        if 'n' not in config:
            raise ValueError("Engine config requires 'n'")

        n = config['n']
        if isinstance(n, bool) or not isinstance(n, int):
            raise ValueError(f"'n' must be an integer, got {n!r}")

        cache_twiddles = config.get('cache_twiddles')
        if cache_twiddles is not None and not isinstance(cache_twiddles, bool):
            raise ValueError(f"'cache_twiddles' must be a boolean, got {cache_twiddles!r}")

        return cls(**config)

    def to_dict(self) -> Dict:
        return asdict(self)


def load_config(config_path: Union[str, Path]) -> EngineConfig:
    """Load an EngineConfig from a YAML file (optionally nested under 'engine')."""
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)

    if isinstance(config, dict) and 'engine' in config:
        config = config['engine']
    return EngineConfig.from_dict(config)


def build_engine(config: Union[EngineConfig, Dict, str, Path]) -> Engine:
    """Compose an Engine from a config object, a mapping or a YAML path."""
    if isinstance(config, (str, Path)):
        config = load_config(config)
    elif isinstance(config, dict):
        config = EngineConfig.from_dict(config)

    return Engine(
        config.n,
        implementation=config.implementation,
        window=config.window,
        allocator=config.allocator,
        element=config.element,
        precision=config.precision,
        cache_twiddles=config.cache_twiddles,
    )
