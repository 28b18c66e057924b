"""Book-domain vocabulary used as a recognition hint.

The OCR engine's language model underweights publishing terms, publisher
names and colophon tokens. Supplying them as custom words biases recognition
toward the text that actually appears on covers and colophons (奥付).

Example:
    >>> from src.bookscan.vocabulary import get_vocabulary
    >>> words = get_vocabulary(extra=["早稲田大学出版部"])
    >>> words[0]
    'ISBN'
"""

from typing import Iterable, Tuple

BOOK_DOMAIN_WORDS: Tuple[str, ...] = (
    # Identifier formats
    "ISBN",
    "ISBN-13",
    "ISBN-10",
    # Roles and publishing process
    "著者",
    "著",
    "編著",
    "監修",
    "訳",
    "翻訳",
    "出版社",
    "出版",
    "発行",
    "発行所",
    "発売",
    "初版",
    "第1版",
    "第2版",
    "改訂版",
    "増補版",
    "新書",
    "文庫",
    "単行本",
    "選書",
    "叢書",
    # Major publishers
    "岩波書店",
    "講談社",
    "新潮社",
    "角川書店",
    "集英社",
    "文藝春秋",
    "中央公論新社",
    "筑摩書房",
    "河出書房新社",
    "早川書房",
    "東京創元社",
    "光文社",
    "PHP研究所",
    "ダイヤモンド社",
    "日経BP",
    "東洋経済新報社",
    "オライリー",
    "技術評論社",
    "翔泳社",
    "インプレス",
    # Price and date
    "定価",
    "本体",
    "円",
    "税別",
    "税込",
    "年",
    "月",
    "日",
    "発行日",
    "印刷",
)


def get_vocabulary(extra: Iterable[str] = ()) -> Tuple[str, ...]:
    """Return the domain vocabulary followed by any extra words.

    Duplicates and blank entries are dropped; first occurrence wins so the
    built-in ordering is preserved.

    Args:
        extra: Additional words, typically from configuration.

    Returns:
        Ordered tuple of unique words.
    """
    seen = set()
    words = []
    for word in (*BOOK_DOMAIN_WORDS, *extra):
        word = word.strip()
        if word and word not in seen:
            seen.add(word)
            words.append(word)
    return tuple(words)
