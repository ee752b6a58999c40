"""
Built-in regulatory tables and JSON seed loading.

The 2025 legal parameters and Échelle 44 rows ship with the package. A
directory of JSON seeds (`regs_legal_<year>.json`, `regs_avs_ai_<year>.json`)
can override them; the requested year is used when present, else the closest
earlier year, else the most recent one available.
"""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from .legal import Echelle44Row, LegalSettings, ScaleTable

logger = logging.getLogger(__name__)

DEFAULT_LEGAL_2025 = LegalSettings(year=2025, echelle44_version="OFAS 2025")

# (income, old_age_invalidity, old_age_invalidity_for_widow_widower,
#  widow_widower_survivor, supplementary_30, child_40, orphan_60), CHF/month
_ECHELLE44_2025: Tuple[Tuple[int, int, int, int, int, int, int], ...] = (
    (15120, 1260, 1512, 1008, 378, 504, 756),
    (16632, 1293, 1551, 1034, 388, 517, 776),
    (18144, 1326, 1591, 1060, 398, 530, 795),
    (19656, 1358, 1630, 1087, 407, 543, 815),
    (21168, 1391, 1669, 1113, 417, 556, 835),
    (22680, 1424, 1709, 1139, 427, 570, 854),
    (24192, 1457, 1748, 1165, 437, 583, 874),
    (25704, 1489, 1787, 1191, 447, 596, 894),
    (27216, 1522, 1826, 1218, 457, 609, 913),
    (28728, 1555, 1866, 1244, 466, 622, 933),
    (30240, 1588, 1905, 1270, 476, 635, 953),
    (31752, 1620, 1944, 1296, 486, 648, 972),
    (33264, 1653, 1984, 1322, 496, 661, 992),
    (34776, 1686, 2023, 1349, 506, 674, 1011),
    (36288, 1719, 2062, 1375, 516, 687, 1031),
    (37800, 1751, 2102, 1401, 525, 701, 1051),
    (39312, 1784, 2141, 1427, 535, 714, 1070),
    (40824, 1817, 2180, 1454, 545, 727, 1090),
    (42336, 1850, 2220, 1480, 555, 740, 1110),
    (43848, 1882, 2259, 1506, 565, 753, 1129),
    (45360, 1915, 2298, 1532, 575, 766, 1149),
    (46872, 1935, 2322, 1548, 581, 774, 1161),
    (48384, 1956, 2347, 1564, 587, 782, 1173),
    (49896, 1976, 2371, 1580, 593, 790, 1185),
    (51408, 1996, 2395, 1597, 599, 798, 1197),
    (52920, 2016, 2419, 1613, 605, 806, 1210),
    (54432, 2036, 2443, 1629, 611, 814, 1222),
    (55944, 2056, 2468, 1645, 617, 823, 1234),
    (57456, 2076, 2492, 1661, 623, 831, 1246),
    (58968, 2097, 2516, 1677, 629, 839, 1258),
    (60480, 2117, 2520, 1693, 635, 847, 1270),
    (61992, 2137, 2520, 1710, 641, 855, 1282),
    (63504, 2157, 2520, 1726, 647, 863, 1294),
    (65016, 2177, 2520, 1742, 653, 871, 1306),
    (66528, 2197, 2520, 1758, 659, 879, 1318),
    (68040, 2218, 2520, 1774, 665, 887, 1331),
    (69552, 2238, 2520, 1790, 671, 895, 1343),
    (71064, 2258, 2520, 1806, 677, 903, 1355),
    (72576, 2278, 2520, 1822, 683, 911, 1367),
    (74088, 2298, 2520, 1839, 689, 919, 1379),
    (75600, 2318, 2520, 1855, 696, 927, 1391),
    (77112, 2339, 2520, 1871, 702, 935, 1403),
    (78624, 2359, 2520, 1887, 708, 943, 1415),
    (80136, 2379, 2520, 1903, 714, 952, 1427),
    (81648, 2399, 2520, 1919, 720, 960, 1439),
    (83160, 2419, 2520, 1935, 726, 968, 1452),
    (84672, 2439, 2520, 1951, 732, 976, 1464),
    (86184, 2460, 2520, 1968, 738, 984, 1476),
    (87696, 2480, 2520, 1984, 744, 992, 1488),
    (89208, 2500, 2520, 2000, 750, 1000, 1500),
    (90720, 2520, 2520, 2016, 756, 1008, 1512),
)

ECHELLE44_2025_ROWS: List[Echelle44Row] = [
    Echelle44Row(
        income=income,
        old_age_invalidity=old_age,
        old_age_invalidity_for_widow_widower=old_age_widow,
        widow_widower_survivor=survivor,
        supplementary_30=supplementary,
        child_40=child,
        orphan_60=orphan,
    )
    for (
        income,
        old_age,
        old_age_widow,
        survivor,
        supplementary,
        child,
        orphan,
    ) in _ECHELLE44_2025
]

_BUILTIN_LEGAL: Dict[int, LegalSettings] = {2025: DEFAULT_LEGAL_2025}
_BUILTIN_SCALES: Dict[int, List[Echelle44Row]] = {2025: ECHELLE44_2025_ROWS}


def pick_year(available: List[int], year: int) -> int:
    """
    Choose the table year to use for a requested year.

    Args:
        available: Years for which a table exists
        year: Requested year

    Returns:
        The requested year, else the closest earlier one, else the most recent
    """
    if not available:
        raise ValueError("No regulatory table available")
    ordered = sorted(available, reverse=True)
    if year in ordered:
        return year
    for candidate in ordered:
        if candidate <= year:
            return candidate
    return ordered[0]


def _seed_years(data_dir: Optional[Path], prefix: str) -> Dict[int, Path]:
    if data_dir is None or not data_dir.is_dir():
        return {}
    years = {}
    for path in data_dir.glob(f"{prefix}_*.json"):
        suffix = path.stem[len(prefix) + 1:]
        if suffix.isdigit():
            years[int(suffix)] = path
    return years


def _read_json(path: Path) -> Union[dict, list]:
    with path.open(encoding="utf-8") as handle:
        return json.load(handle)


def load_legal_settings(
    year: int = 2025, data_dir: Optional[Union[str, Path]] = None
) -> LegalSettings:
    """
    Load the legal parameters for a year.

    Args:
        year: Requested legal year
        data_dir: Optional directory holding `regs_legal_<year>.json` seeds

    Returns:
        Validated LegalSettings
    """
    seeds = _seed_years(Path(data_dir) if data_dir else None, "regs_legal")
    if seeds:
        chosen = pick_year(list(seeds), year)
        logger.info(f"Loading legal settings {chosen} from {seeds[chosen]}")
        payload = _read_json(seeds[chosen])
        if isinstance(payload, dict):
            payload.setdefault("Legal_Year", chosen)
        return LegalSettings.model_validate(payload)

    if data_dir:
        logger.warning(f"No legal settings seed in {data_dir}, using built-in tables")
    chosen = pick_year(list(_BUILTIN_LEGAL), year)
    if chosen != year:
        logger.warning(f"Legal settings for {year} not available, using {chosen}")
    return _BUILTIN_LEGAL[chosen]


def load_scale(
    year: int = 2025, data_dir: Optional[Union[str, Path]] = None
) -> ScaleTable:
    """
    Load the Échelle 44 scale for a year.

    Seeds are either a list of rows or an object with a `rows` list.

    Args:
        year: Requested legal year
        data_dir: Optional directory holding `regs_avs_ai_<year>.json` seeds

    Returns:
        The scale table
    """
    seeds = _seed_years(Path(data_dir) if data_dir else None, "regs_avs_ai")
    if seeds:
        chosen = pick_year(list(seeds), year)
        payload = _read_json(seeds[chosen])
        rows = payload.get("rows") if isinstance(payload, dict) else payload
        if not isinstance(rows, list):
            raise ValueError(f"Invalid scale seed {seeds[chosen]}: missing 'rows'")
        logger.info(f"Loaded {len(rows)} scale rows for {chosen} from {seeds[chosen]}")
        return ScaleTable.from_records(rows)

    chosen = pick_year(list(_BUILTIN_SCALES), year)
    if chosen != year:
        logger.warning(f"Échelle 44 for {year} not available, using {chosen}")
    return ScaleTable(_BUILTIN_SCALES[chosen])


def default_scale() -> ScaleTable:
    """The built-in 2025 Échelle 44 scale."""
    return ScaleTable(ECHELLE44_2025_ROWS)
