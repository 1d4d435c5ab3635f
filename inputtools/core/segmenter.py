from typing import NamedTuple

CJK_START = 0x4E00
CJK_END = 0x9FFF


class Segments(NamedTuple):
    retained: str
    query: str

    @property
    def joined(self) -> str:
        return self.retained + self.query


def is_cjk(ch: str) -> bool:
    return CJK_START <= ord(ch) <= CJK_END


def segment(text: str) -> Segments:
    """
    Split a mixed buffer into retained CJK ideographs and the query-bearing rest.
    ASCII digits are control keys and are dropped from both parts.
    """
    if not text:
        return Segments("", "")

    retained = []
    query = []
    for ch in text:
        if is_cjk(ch):
            retained.append(ch)
        elif "0" <= ch <= "9":
            continue
        else:
            query.append(ch)
    return Segments("".join(retained), "".join(query))
