import re
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, Optional, Tuple

BRAND_UNKNOWN = 'unknown'
BRAND_GAMESHARK = 'gameshark'
BRAND_ACTION_REPLAY = 'action_replay'
BRAND_EQUALIZER = 'equalizer'
BRAND_GAME_BUSTER = 'game_buster'
BRAND_TRAINER = 'trainer'
BRAND_LIBRESHARK = 'libreshark'

BRAND_LABELS: Dict[str, str] = {BRAND_UNKNOWN: 'Unknown', BRAND_GAMESHARK: 'GameShark', BRAND_ACTION_REPLAY: 'Action Replay', BRAND_EQUALIZER: 'Equalizer', BRAND_GAME_BUSTER: 'Game Buster', BRAND_TRAINER: 'Trainer', BRAND_LIBRESHARK: 'LibreShark'}

ENGLISH_US = 'en-US'
ENGLISH_UK = 'en-GB'
GERMAN_GERMANY = 'de-DE'
UNKNOWN_LOCALE = ''

UNVERIFIED_DISAMBIGUATOR = 'MISSING FROM OUR DATABASE!'

# raw timestamp -> (number, disambiguator, (y, m, d, H, M), brand, locale)
KNOWN_VERSIONS: Dict[str, Tuple] = {
    '14:56 Apr 15 98': (1.11, None, (1998, 4, 15, 14, 56), BRAND_ACTION_REPLAY, ENGLISH_UK),
    '15:50 Mar 24 99': (3.0, None, (1999, 3, 24, 15, 50), BRAND_ACTION_REPLAY, ENGLISH_UK),
    '16:08 Apr 18': (3.3, None, (2000, 4, 18, 16, 8), BRAND_ACTION_REPLAY, ENGLISH_UK),
    '12:50 Aug 1 97': (1.02, None, (1997, 8, 1, 12, 50), BRAND_GAMESHARK, ENGLISH_US),
    '10:35 Aug 19 97': (1.04, None, (1997, 8, 19, 10, 35), BRAND_GAMESHARK, ENGLISH_US),
    '16:25 Sep 4 97': (1.05, 'Thursday', (1997, 9, 4, 16, 25), BRAND_GAMESHARK, ENGLISH_US),
    '13:51 Sep 5 97': (1.05, 'Friday', (1997, 9, 5, 13, 51), BRAND_GAMESHARK, ENGLISH_US),
    '14:25 Sep 19 97': (1.06, None, (1997, 9, 19, 14, 25), BRAND_GAMESHARK, ENGLISH_US),
    '17:21 Oct 27 97': (1.07, 'October', (1997, 10, 27, 17, 21), BRAND_GAMESHARK, ENGLISH_US),
    '10:24 Nov 7 97': (1.07, 'November', (1997, 11, 7, 10, 24), BRAND_GAMESHARK, ENGLISH_US),
    '11:58 Nov 24 97': (1.08, 'November', (1997, 11, 24, 11, 58), BRAND_GAMESHARK, ENGLISH_US),
    '11:10 Dec 8 97': (1.08, 'December', (1997, 12, 8, 11, 10), BRAND_GAMESHARK, ENGLISH_US),
    '17:40 Jan 5 98': (1.09, None, (1998, 1, 5, 17, 40), BRAND_GAMESHARK, ENGLISH_US),
    '08:06 Mar 5 98': (2.0, 'March', (1998, 3, 5, 8, 6), BRAND_GAMESHARK, ENGLISH_US),
    '10:05 Apr 6 98': (2.0, 'April', (1998, 4, 6, 10, 5), BRAND_GAMESHARK, ENGLISH_US),
    '13:57 Aug 25 98': (2.1, None, (1998, 8, 25, 13, 57), BRAND_GAMESHARK, ENGLISH_US),
    '12:47 Dec 18 98': (2.21, None, (1998, 12, 18, 12, 47), BRAND_GAMESHARK, ENGLISH_US),
    '12:58 May 4': (2.5, None, (2000, 5, 4, 12, 58), BRAND_GAMESHARK, ENGLISH_US),
    '15:05 Apr 1 99': (3.0, None, (1999, 4, 1, 15, 5), BRAND_GAMESHARK, ENGLISH_US),
    '16:50 Jun 9 99': (3.1, None, (1999, 6, 9, 16, 50), BRAND_GAMESHARK, ENGLISH_US),
    '18:45 Jun 22 99': (3.2, None, (1999, 6, 22, 18, 45), BRAND_GAMESHARK, ENGLISH_US),
    '14:26 Jan 4': (3.21, None, (2000, 1, 4, 14, 26), BRAND_GAMESHARK, ENGLISH_US),
    '09:54 Mar 27': (3.3, 'March', (2000, 3, 27, 9, 54), BRAND_GAMESHARK, ENGLISH_US),
    '15:56 Apr 4': (3.3, 'April', (2000, 4, 4, 15, 56), BRAND_GAMESHARK, ENGLISH_US),
    '09:44 Jul 20 99': (3.0, None, (1999, 7, 20, 9, 44), BRAND_EQUALIZER, ENGLISH_UK),
    '11:09 Aug 5 99': (3.21, None, (1999, 8, 5, 11, 9), BRAND_GAME_BUSTER, GERMAN_GERMANY),
    '2003 iCEMARi0': (1.0, 'Perfect Trainer 1.0b', (2003, 6, 18, 0, 0), BRAND_TRAINER, ENGLISH_US),
}

TITLE_BRANDS: Dict[str, Tuple[str, str]] = {'GameShark': (BRAND_GAMESHARK, ENGLISH_US), 'GameShark Pro': (BRAND_GAMESHARK, ENGLISH_US), 'Action Replay': (BRAND_ACTION_REPLAY, ENGLISH_UK), 'Action Replay Pro': (BRAND_ACTION_REPLAY, ENGLISH_UK), 'Equalizer': (BRAND_EQUALIZER, ENGLISH_UK), 'Game Buster': (BRAND_GAME_BUSTER, GERMAN_GERMANY), 'LibreShark': (BRAND_LIBRESHARK, ENGLISH_US), 'LibreShark Pro': (BRAND_LIBRESHARK, ENGLISH_US)}

DATEL_TIMESTAMP_RE = re.compile("(?P<HH>\\d\\d):(?P<mm>\\d\\d) (?P<MMM>\\w\\w\\w) (?P<dd>\\d\\d?)(?: '?(?P<yy>\\d{2,4})?)?")
ISO_TIMESTAMP_RE = re.compile('(?P<yyyy>\\d{4})(?P<MM>\\d\\d)(?P<dd>\\d\\d)T(?P<HH>\\d\\d)(?P<mm>\\d\\d)(?P<ss>\\d\\d)Z')
TITLE_RE = re.compile('(?:N64 )?(?P<brand>.+) (?:v|Version )(?P<vernum>[0-9]+(?:\\.[0-9]+)?)', re.IGNORECASE)


@dataclass(frozen=True)
class RomVersion:
    number: float
    brand: str
    locale: str
    disambiguator: Optional[str]
    raw_timestamp: str
    build_timestamp: datetime
    is_known: bool
    title: Optional[str] = None

    @property
    def display_brand(self) -> str:
        return BRAND_LABELS.get(self.brand, self.brand)

    @property
    def display_number(self) -> str:
        if self.disambiguator:
            return f'v{self.number:.2f} ({self.disambiguator})'
        return f'v{self.number:.2f}'

    @property
    def build_timestamp_iso(self) -> str:
        return self.build_timestamp.strftime('%Y-%m-%dT%H:%M:%S')

    def __str__(self):
        return f"{self.display_brand} {self.display_number}, built on {self.build_timestamp:%Y-%m-%d %H:%M} ('{self.raw_timestamp}') - {self.locale or 'unknown locale'}"


def known_version(raw: str) -> Optional[RomVersion]:
    entry = KNOWN_VERSIONS.get(raw.strip())
    if entry is None:
        return None
    number, disambiguator, ts, brand, locale = entry
    return RomVersion(number=number, brand=brand, locale=locale, disambiguator=disambiguator, raw_timestamp=raw, build_timestamp=datetime(*ts), is_known=True)


def parse_datel_timestamp(trimmed: str, title: Optional[str]=None) -> Optional[datetime]:
    match = DATEL_TIMESTAMP_RE.search(trimmed)
    if not match:
        return None
    month = match.group('MMM')
    # Equalizer dumps carry a corrupted month
    if month == 'J5l':
        month = 'Jul'
    yy = match.group('yy')
    if yy is None:
        # builds from 2000 omit the year
        yyyy = '2000'
    elif len(yy) == 4:
        yyyy = yy
    elif title and 'LibreShark' in title:
        yyyy = f'20{yy}'
    else:
        yyyy = f'19{yy}'
    text = f"{match.group('HH')}:{match.group('mm')} {month} {match.group('dd')} {yyyy}"
    try:
        return datetime.strptime(text, '%H:%M %b %d %Y')
    except ValueError:
        return None


def unverified_version(raw: str, title: Optional[str]=None) -> Optional[RomVersion]:
    trimmed = raw.strip()
    timestamp = None
    iso = ISO_TIMESTAMP_RE.search(trimmed)
    if iso:
        try:
            timestamp = datetime.strptime(iso.group(0), '%Y%m%dT%H%M%SZ')
        except ValueError:
            timestamp = None
    if timestamp is None:
        timestamp = parse_datel_timestamp(trimmed, title)
    if timestamp is None:
        return None
    return RomVersion(number=0.0, brand=BRAND_UNKNOWN, locale=UNKNOWN_LOCALE, disambiguator=UNVERIFIED_DISAMBIGUATOR, raw_timestamp=raw, build_timestamp=timestamp, is_known=False)


def with_title(version: RomVersion, title: Optional[str]) -> RomVersion:
    if title is None:
        return version
    version = replace(version, title=title)
    if version.is_known:
        return version
    match = TITLE_RE.search(title)
    if not match:
        return version
    brand = TITLE_BRANDS.get(match.group('brand').strip())
    if brand is None:
        return version
    try:
        number = float(match.group('vernum'))
    except ValueError:
        return version
    disambiguator = None if brand[0] == BRAND_LIBRESHARK else version.disambiguator
    return replace(version, number=number, brand=brand[0], locale=brand[1], disambiguator=disambiguator)


def resolve_version(raw: str, title: Optional[str]=None) -> Optional[RomVersion]:
    version = known_version(raw) or unverified_version(raw, title)
    if version is None:
        return None
    return with_title(version, title)
