#!/usr/bin/env python3
"""
Supported encodings and name normalization.

Every encoding name that enters the converter (command-line arguments,
detector answers, editor hints, saved reports) goes through
normalize_encoding() so equality checks compare canonical names only.
Unknown names are rejected with UnknownEncodingError.

Usage:
    python encoding_names.py            # list supported encodings (JSON)
    python encoding_names.py <name>     # resolve one name
"""

import sys
import json
from enum import Enum
from typing import List, Optional, Tuple


class UnknownEncodingError(ValueError):
    """Raised when a name does not resolve to a supported encoding."""

    def __init__(self, name):
        super().__init__(f"Unsupported encoding: {name!r}")
        self.name = name


class SupportedEncoding(Enum):
    """Closed set of encodings the converter reads and writes.

    Each member carries its canonical name, the Python codec that does the
    transcoding, a picker label/description, and extra spellings accepted
    on input. Aliases must resolve to the same Python codec as the member.
    """

    UTF_8 = ('utf-8', 'utf-8', 'UTF-8', 'Unicode UTF-8', ('utf8',))
    UTF_8_SIG = ('utf-8-sig', 'utf-8-sig', 'UTF-8 BOM', 'Unicode UTF-8 with BOM', ('utf8-sig',))
    UTF_16 = ('utf-16', 'utf-16', 'UTF-16', 'Unicode UTF-16', ('utf16',))
    UTF_16LE = ('utf-16le', 'utf-16-le', 'UTF-16LE', 'Unicode UTF-16 Little Endian', ('utf-16-le', 'utf16le'))
    UTF_16BE = ('utf-16be', 'utf-16-be', 'UTF-16BE', 'Unicode UTF-16 Big Endian', ('utf-16-be', 'utf16be'))
    UTF_32 = ('utf-32', 'utf-32', 'UTF-32', 'Unicode UTF-32', ('utf32',))
    ASCII = ('ascii', 'ascii', 'ASCII', 'US-ASCII', ('us-ascii', '646'))
    BIG5 = ('big5', 'big5', 'Big5', 'Traditional Chinese', ('big-5', 'csbig5'))
    GBK = ('gbk', 'gbk', 'GBK', 'Simplified Chinese', ('cp936', 'ms936'))
    GB2312 = ('gb2312', 'gb2312', 'GB2312', 'Simplified Chinese (older)', ('euc-cn', 'euccn'))
    GB18030 = ('gb18030', 'gb18030', 'GB18030', 'Chinese national standard', ('gb18030-2000',))
    SHIFT_JIS = ('shift_jis', 'shift_jis', 'Shift_JIS', 'Japanese', ('sjis', 's-jis', 'shiftjis'))
    EUC_JP = ('euc-jp', 'euc_jp', 'EUC-JP', 'Japanese (Unix)', ('eucjp', 'ujis'))
    ISO_2022_JP = ('iso-2022-jp', 'iso2022_jp', 'ISO-2022-JP', 'Japanese (mail)', ('iso2022-jp', 'csiso2022jp'))
    EUC_KR = ('euc-kr', 'euc_kr', 'EUC-KR', 'Korean', ('euckr',))
    CP949 = ('cp949', 'cp949', 'CP949', 'Korean (Unified Hangul)', ('uhc', 'ms949'))
    ISO_8859_1 = ('iso-8859-1', 'latin-1', 'ISO-8859-1', 'Western European', ('latin1', 'latin-1', 'iso8859-1', 'l1'))
    ISO_8859_2 = ('iso-8859-2', 'iso8859_2', 'ISO-8859-2', 'Central European', ('latin2', 'iso8859-2', 'l2'))
    ISO_8859_5 = ('iso-8859-5', 'iso8859_5', 'ISO-8859-5', 'Cyrillic', ('iso8859-5', 'cyrillic'))
    ISO_8859_7 = ('iso-8859-7', 'iso8859_7', 'ISO-8859-7', 'Greek', ('iso8859-7', 'greek'))
    ISO_8859_15 = ('iso-8859-15', 'iso8859_15', 'ISO-8859-15', 'Western European (euro)', ('iso8859-15', 'latin9', 'l9'))
    WINDOWS_1250 = ('windows-1250', 'cp1250', 'Windows-1250', 'Windows Central European', ('cp1250',))
    WINDOWS_1251 = ('windows-1251', 'cp1251', 'Windows-1251', 'Windows Cyrillic', ('cp1251',))
    WINDOWS_1252 = ('windows-1252', 'cp1252', 'Windows-1252', 'Windows Western European', ('cp1252',))
    KOI8_R = ('koi8-r', 'koi8_r', 'KOI8-R', 'Russian', ('cskoi8r',))
    IBM866 = ('ibm866', 'cp866', 'IBM866', 'DOS Cyrillic', ('cp866', '866'))
    MAC_ROMAN = ('mac-roman', 'mac_roman', 'MacRoman', 'Mac Western European', ('macroman', 'macintosh'))
    MAC_CYRILLIC = ('mac-cyrillic', 'mac_cyrillic', 'MacCyrillic', 'Mac Cyrillic', ('maccyrillic',))
    TIS_620 = ('tis-620', 'tis_620', 'TIS-620', 'Thai', ('tis620',))

    def __init__(self, canonical, codec, label, description, aliases):
        self.canonical = canonical
        self.codec = codec
        self.label = label
        self.description = description
        self.aliases = aliases


# Encodings offered by the interactive picker, in display order
PICKER_ENCODINGS = (
    SupportedEncoding.UTF_8,
    SupportedEncoding.BIG5,
    SupportedEncoding.GBK,
    SupportedEncoding.GB2312,
    SupportedEncoding.SHIFT_JIS,
    SupportedEncoding.EUC_KR,
    SupportedEncoding.ISO_8859_1,
    SupportedEncoding.WINDOWS_1252,
    SupportedEncoding.UTF_16,
    SupportedEncoding.UTF_16BE,
    SupportedEncoding.UTF_16LE,
)

AUTO_DETECT = 'auto'


def _key(name: str) -> str:
    return name.strip().lower().replace('_', '-')


def _build_lookup():
    table = {}
    for member in SupportedEncoding:
        for spelling in (member.canonical,) + tuple(member.aliases):
            key = _key(spelling)
            existing = table.get(key)
            if existing is not None and existing is not member:
                raise RuntimeError(f"Alias {spelling!r} claimed by {existing.name} and {member.name}")
            table[key] = member
    return table


_LOOKUP = _build_lookup()


def lookup_encoding(name: str) -> SupportedEncoding:
    """Resolve any accepted spelling to its SupportedEncoding member."""
    if isinstance(name, SupportedEncoding):
        return name
    if not isinstance(name, str) or not name.strip():
        raise UnknownEncodingError(name)
    member = _LOOKUP.get(_key(name))
    if member is None:
        raise UnknownEncodingError(name)
    return member


def normalize_encoding(name: str) -> str:
    """Return the canonical name for any accepted spelling."""
    return lookup_encoding(name).canonical


def is_supported(name: Optional[str]) -> bool:
    try:
        lookup_encoding(name)
    except UnknownEncodingError:
        return False
    return True


def python_codec(name: str) -> str:
    """Python codec used to transcode the given encoding."""
    return lookup_encoding(name).codec


def is_utf8(name: str) -> bool:
    return lookup_encoding(name) is SupportedEncoding.UTF_8


def parse_encoding_argument(value: Optional[str]) -> Optional[str]:
    """Validate a command-line encoding value; 'auto' (or empty) means detect."""
    if value is None or not value.strip() or value.strip().lower() == AUTO_DETECT:
        return None
    return normalize_encoding(value)


def encoding_choices() -> List[Tuple[str, str]]:
    """(label, description) pairs for the interactive picker."""
    return [(member.label, member.description) for member in PICKER_ENCODINGS]


def main():
    if len(sys.argv) > 1:
        name = sys.argv[1]
        try:
            member = lookup_encoding(name)
        except UnknownEncodingError as e:
            print(json.dumps({'error': str(e)}))
            sys.exit(1)
        print(json.dumps({
            'input': name,
            'canonical': member.canonical,
            'codec': member.codec,
            'label': member.label,
        }))
        sys.exit(0)

    listing = [
        {
            'canonical': member.canonical,
            'label': member.label,
            'description': member.description,
            'aliases': list(member.aliases),
        }
        for member in SupportedEncoding
    ]
    print(json.dumps(listing, indent=2))
    sys.exit(0)


if __name__ == '__main__':
    main()
