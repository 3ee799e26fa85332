"""
The RouterOS API sentence format.

A sentence is a sequence of words terminated by an empty word. Each word is prefixed by its length,
encoded in 1 to 5 bytes: the number of leading 1 bits in the first byte gives the count of additional
length bytes.

Replies start with a reply word (!re, !done, !trap or !fatal) followed by attribute words
of the form '=name=value'.
"""
from io import IOBase

REPLY_ROW = '!re'
REPLY_DONE = '!done'
REPLY_TRAP = '!trap'
REPLY_FATAL = '!fatal'

default_encoding = 'utf-8'


class ApiProtocolError(ValueError):
    """ The stream does not contain a well-formed API sentence. """


def encode_length(length) -> bytes:
    """
    >>> encode_length(0x7f)
    b'\\x7f'
    >>> encode_length(0x80)
    b'\\x80\\x80'
    """
    if length < 0:
        raise ValueError("negative word length %d" % length)
    if length < 0x80:
        return bytes([length])
    if length < 0x4000:
        return (length | 0x8000).to_bytes(2, 'big')
    if length < 0x200000:
        return (length | 0xC00000).to_bytes(3, 'big')
    if length < 0x10000000:
        return (length | 0xE0000000).to_bytes(4, 'big')
    if length < 0x100000000:
        return b'\xf0' + length.to_bytes(4, 'big')
    raise ValueError("word length %d too large" % length)


def _read_exactly(stream: IOBase, count) -> bytes:
    data = stream.read(count)
    if data is None or len(data) != count:
        raise ApiProtocolError("stream ended after %d of %d bytes" % (0 if data is None else len(data), count))
    return data


def decode_length(stream: IOBase) -> int:
    first = _read_exactly(stream, 1)[0]
    if first & 0x80 == 0x00:
        return first
    if first & 0xC0 == 0x80:
        extra, value = 1, first & 0x3F
    elif first & 0xE0 == 0xC0:
        extra, value = 2, first & 0x1F
    elif first & 0xF0 == 0xE0:
        extra, value = 3, first & 0x0F
    elif first == 0xF0:
        extra, value = 4, 0
    else:
        raise ApiProtocolError("reserved control byte 0x%02x" % first)
    for b in _read_exactly(stream, extra):
        value = (value << 8) | b
    return value


def encode_word(word: str, encoding=default_encoding) -> bytes:
    data = word.encode(encoding)
    return encode_length(len(data)) + data


def encode_sentence(words, encoding=default_encoding) -> bytes:
    return b''.join(encode_word(w, encoding) for w in words) + b'\x00'


def write_sentence(stream: IOBase, words, encoding=default_encoding):
    stream.write(encode_sentence(words, encoding))
    stream.flush()


def read_sentence(stream: IOBase, encoding=default_encoding):
    """
    Reads words up to the terminating empty word.
    :return: the list of words in the sentence
    """
    words = []
    while True:
        length = decode_length(stream)
        if not length:
            return words
        words.append(_read_exactly(stream, length).decode(encoding, 'replace'))


def attribute_words(attributes, prefix='='):
    """ formats a mapping as '=name=value' words (or '?name=value' query words with prefix '?'). """
    if not attributes:
        return []
    return [prefix + str(name) + '=' + str(value) for name, value in attributes.items()]


def parse_reply(words):
    """
    Splits a reply sentence into its reply word and attributes.
    Words that are not attribute words (such as .tag=) are ignored.
    :return: a tuple (reply, dict of attributes)
    """
    if not words:
        raise ApiProtocolError("empty reply sentence")
    reply, attributes = words[0], {}
    for word in words[1:]:
        if word.startswith('='):
            name, sep, value = word[1:].partition('=')
            if not sep:
                raise ApiProtocolError("malformed attribute word '%s'" % word)
            attributes[name] = value
    return reply, attributes
