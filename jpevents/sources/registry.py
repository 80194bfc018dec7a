from __future__ import annotations

from typing import Dict, List, Type

from .base import BaseAdapter, source_key
from .adapters.billboard_live import BillboardLiveAdapter
from .adapters.japan_travel import JapanTravelAdapter
from .adapters.kabuki_bito import KabukiBitoAdapter
from .adapters.nhk_symphony import NHKSymphonyAdapter
from .adapters.parco import ParcoAdapter
from .adapters.ticket_pia import TicketPiaAdapter
from .adapters.tokyo_art_beat import TokyoArtBeatAdapter
from .adapters.tokyo_cheapo import TokyoCheapoAdapter


# Run order of a full crawl
ADAPTER_CLASSES: List[Type[BaseAdapter]] = [
    TokyoCheapoAdapter,
    JapanTravelAdapter,
    TicketPiaAdapter,
    KabukiBitoAdapter,
    TokyoArtBeatAdapter,
    NHKSymphonyAdapter,
    BillboardLiveAdapter,
    ParcoAdapter,
]

ADAPTERS: Dict[str, Type[BaseAdapter]] = {source_key(cls.name): cls for cls in ADAPTER_CLASSES}
