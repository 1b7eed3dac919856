"""Runtime configuration for arplogger.

A `Config` value is built once at startup (defaults, then an optional JSON
file, then command-line overrides) and handed to the components that need
it. Nothing reads configuration from module-level state.
"""
from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional

_DEFAULTS: Dict[str, Any] = {
    'interfaces': ['eth0'],
    'logfile': '/var/log/arplogger.log',
    'database': '/var/cache/arplogger.db',
    # 0 = unbounded notification queue
    'queue_maxsize': 0,
    # seconds between stop-event checks while blocked on a capture handle
    'poll_interval': 0.5,
}


def parse_interfaces(value) -> List[str]:
    """Accept either a comma-separated string or a list of names."""
    if isinstance(value, str):
        value = value.split(',')
    names = [str(v).strip() for v in value]
    return [n for n in names if n]


@dataclass
class Config:
    interfaces: List[str] = field(default_factory=lambda: list(_DEFAULTS['interfaces']))
    logfile: str = _DEFAULTS['logfile']
    database: str = _DEFAULTS['database']
    queue_maxsize: int = _DEFAULTS['queue_maxsize']
    poll_interval: float = _DEFAULTS['poll_interval']

    def __post_init__(self):
        self.interfaces = parse_interfaces(self.interfaces)
        if not self.interfaces:
            raise ValueError('at least one interface is required')
        self.queue_maxsize = int(self.queue_maxsize)
        if self.queue_maxsize < 0:
            raise ValueError('queue_maxsize must be >= 0')
        self.poll_interval = float(self.poll_interval)
        if self.poll_interval <= 0:
            raise ValueError('poll_interval must be > 0')

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load(path: Optional[str] = None, **overrides) -> Config:
    """Build a Config from defaults, an optional JSON file and overrides.

    Overrides whose value is None are ignored so unset command-line flags do
    not mask values from the file. Unknown keys in the file are rejected.
    """
    values: Dict[str, Any] = dict(_DEFAULTS)
    if path:
        with open(os.path.expanduser(path), 'r') as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError('%s: expected a JSON object' % path)
        known = {fld.name for fld in fields(Config)}
        unknown = set(data) - known
        if unknown:
            raise ValueError('%s: unknown configuration keys: %s' % (path, ', '.join(sorted(unknown))))
        values.update(data)
    values.update({k: v for k, v in overrides.items() if v is not None})
    return Config(**values)
