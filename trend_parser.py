# turn scraped trend-page text into game blocks and trend records
# no browser in here: everything works on plain lists of strings

import re, random, logging
from dataclasses import dataclass, replace
from typing import List, Dict, Optional, Tuple, Sequence, Mapping

from trend_config import MIN_TREND_LENGTH, TEAM_ALIASES

logger = logging.getLogger("trends.parser")

PLACEHOLDER_TEAMS = "Matchup TBD"
NO_RECORD = "N/A"
DEFAULT_STAT = "Spread"
DEFAULT_SAMPLE = "10 games"
SHORT_SAMPLE = "5 games"

# "7:00 PM ET", "7:00pm", "19:05 EDT"
re_time = re.compile(
    r"^(\d{1,2}):([0-5]\d)\s*(AM|PM)?\s*(ET|EST|EDT|CT|CST|CDT|MT|MST|MDT|PT|PST|PDT)?$", re.I)
re_status = re.compile(r"^(FINAL|TODAY|LIVE|POSTPONED)$", re.I)
# "Utah VS New York", "Boston @ Toronto"
re_matchup = re.compile(r"^[A-Za-z0-9 .]+?(?:\s+VS\.?\s+|\s*@\s*)[A-Za-z0-9 .]+$", re.I)
re_direction = re.compile(r"\b(OVER|UNDER|ATS|SU)\b", re.I)
re_any_record = re.compile(r"\d+-\d+")
re_record = re.compile(r"\b\d{1,2}-\d{1,2}(?:-\d{1,2})?\b")
re_over_under = re.compile(r"\b(OVER|UNDER)\b", re.I)
re_weekday = re.compile(r"\b(Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday),", re.I)

SEPARATORS = {"vs", "vs.", "@"}
FOOTER_MARKERS = ("copyright", "©", "all rights reserved", "source:", "gamble responsibly")

TEMPLATES = (
    "The {team} games have leaned {stat} the total, hitting in {record} of their previous {sample}.",
    "Recent {team} matchups show a strong tendency toward the {stat}, with a {record} mark over the last {sample}.",
    "The {team} have produced {record} results toward the {stat} across their past {sample}.",
    "Betting trends favor the {stat} for {team}, cashing in {record} during the last {sample}.",
)


@dataclass(frozen=True)
class GameBlock:
    time: str
    teams: str = PLACEHOLDER_TEAMS
    trends: Tuple[str, ...] = ()

    def to_dict(self) -> Dict:
        return {"time": self.time, "teams": self.teams, "trends": list(self.trends)}


@dataclass(frozen=True)
class ScanState:
    """Everything the line scan carries from one line to the next."""
    blocks: Tuple[GameBlock, ...] = ()
    current: Optional[GameBlock] = None
    date: Optional[str] = None
    tz: str = ""   # suffix of the last time marker that had one


@dataclass(frozen=True)
class ScanResult:
    blocks: List[GameBlock]
    date: Optional[str]


def split_lines(txt: str) -> List[str]:
    return [x.strip() for x in txt.splitlines() if x.strip()]


def is_time_marker(s: str) -> bool:
    return bool(re_time.match(s) or re_status.match(s))


def normalize_time(s: str, last_tz: str = "") -> Tuple[str, str]:
    """
    Return (display time, timezone to carry forward).

    A clock time without a zone borrows the zone of the previous marker.
    Status tokens come back upper-cased and leave the zone untouched.
    """
    m = re_time.match(s)
    if not m:
        return s.upper(), last_tz
    tz = m.group(4)
    if tz:
        return s, tz.upper()
    if last_tz:
        return f"{s} {last_tz}", last_tz
    return s, last_tz


def is_matchup(s: str) -> bool:
    return bool(re_matchup.match(s))


def is_trend_snippet(s: str, min_length: int = MIN_TREND_LENGTH) -> bool:
    # long enough, names a bet direction, not page furniture; a record is optional
    if len(s) <= min_length:
        return False
    low = s.lower()
    if any(mark in low for mark in FOOTER_MARKERS):
        return False
    return bool(re_direction.search(s))


def is_trend_text(s: str, min_length: int = MIN_TREND_LENGTH) -> bool:
    return is_trend_snippet(s, min_length) and bool(re_any_record.search(s))


def _closed_blocks(state: ScanState) -> Tuple[GameBlock, ...]:
    # empty blocks never make it out
    if state.current is not None and state.current.trends:
        return state.blocks + (state.current,)
    return state.blocks


def step(state: ScanState, lines: Sequence[str], i: int) -> Tuple[ScanState, int]:
    """Consume the line at i (and sometimes the two after it). Returns (new state, next index)."""
    line = lines[i]

    # date header, e.g. "Monday, October 19"; checked on every line
    if re_weekday.search(line):
        state = replace(state, date=line)

    if is_time_marker(line):
        when, tz = normalize_time(line, state.tz)
        return replace(state, blocks=_closed_blocks(state), current=GameBlock(time=when), tz=tz), i + 1

    cur = state.current
    if cur is None:
        return state, i + 1

    # "Utah" / "VS" / "New York" on three lines
    if (i + 2 < len(lines) and lines[i + 1].strip().lower() in SEPARATORS
            and not is_time_marker(lines[i + 2])):
        for skipped in lines[i + 1:i + 3]:
            if re_weekday.search(skipped):
                state = replace(state, date=skipped)
        teams = lines[i] + lines[i + 1] + lines[i + 2]
        return replace(state, current=replace(cur, teams=teams)), i + 3

    if is_matchup(line):
        return replace(state, current=replace(cur, teams=line)), i + 1

    if is_trend_text(line):
        return replace(state, current=replace(cur, trends=cur.trends + (line,))), i + 1

    return state, i + 1


def classify_lines(lines: Sequence[str]) -> ScanResult:
    """
    Group trend lines under the game they belong to.

    A time marker opens a block, the next one (or the end of input) closes it.
    Blocks that never picked up a trend are dropped.
    """
    state, i, n = ScanState(), 0, len(lines)
    while i < n:
        state, i = step(state, lines, i)
    blocks = list(_closed_blocks(state))
    logger.debug(f"[PARSE] {n} lines -> {len(blocks)} game blocks (date={state.date!r})")
    return ScanResult(blocks=blocks, date=state.date)


def guess_team(raw: str, aliases: Mapping[str, Sequence[str]] = TEAM_ALIASES) -> str:
    # known names first, else the first two words (often wrong, accepted)
    for canon, subs in aliases.items():
        if any(sub in raw for sub in subs):
            return canon
    return " ".join(raw.split()[:2])


def parse_trend(raw: str, aliases: Mapping[str, Sequence[str]] = TEAM_ALIASES) -> Dict:
    m_rec = re_record.search(raw)
    m_stat = re_over_under.search(raw)   # earliest of OVER / UNDER wins
    return {
        "team": guess_team(raw, aliases),
        "stat": m_stat.group(1).upper() if m_stat else DEFAULT_STAT,
        "record": m_rec.group(0) if m_rec else NO_RECORD,
        "sample": SHORT_SAMPLE if "last 5" in raw.lower() else DEFAULT_SAMPLE,
        "raw": raw,
        "processed": True,
    }


def reword_trend(trend: Mapping, rng: Optional[random.Random] = None, index: Optional[int] = None) -> str:
    """
    Fill one of the display templates with a parsed trend.

    Pass `index` to pick a template, or `rng` to control the draw;
    otherwise the choice comes from the module-level random generator.
    """
    if index is None:
        index = (rng or random).randrange(len(TEMPLATES))
    return TEMPLATES[index % len(TEMPLATES)].format(
        team=trend["team"], stat=trend["stat"], record=trend["record"], sample=trend["sample"])


def process_trend(raw: str, rng: Optional[random.Random] = None) -> Dict:
    rec = parse_trend(raw)
    rec["display_text"] = reword_trend(rec, rng=rng)
    return rec
