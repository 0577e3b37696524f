"""Reader for Clojure top-level forms.

Only reads; nothing is ever evaluated. Read-eval (``#=``) is rejected and
tagged literals are returned as ``Tagged`` values without being resolved.
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from fractions import Fraction
from typing import Any, Iterator, List, Optional, TextIO

from .config import ReaderOptions, default_reader_options
from .errors import ReaderError
from .forms import (
	Char,
	Keyword,
	ListForm,
	MapForm,
	Regex,
	SetForm,
	Symbol,
	Tagged,
	Vector,
	with_meta,
)

logger = logging.getLogger(__name__)


EOF = object()
_NOTHING = object()

QUOTE = Symbol("quote")
SYNTAX_QUOTE = Symbol("syntax-quote")
UNQUOTE = Symbol("unquote", "clojure.core")
UNQUOTE_SPLICING = Symbol("unquote-splicing", "clojure.core")
DEREF = Symbol("deref", "clojure.core")
VAR = Symbol("var")
FN = Symbol("fn*")
TAG = Keyword("tag")

WHITESPACE = frozenset(" \t\n\r\f,")
TERMINATORS = frozenset('";@^`~()[]{}\\')

_INT_RE = re.compile(
	r"([-+]?)(?:(0)|([1-9][0-9]*)|0[xX]([0-9A-Fa-f]+)|0([0-7]+)|([1-9][0-9]?)[rR]([0-9A-Za-z]+)|0[0-9]+)(N)?"
)
_FLOAT_RE = re.compile(r"([-+]?[0-9]+(\.[0-9]*)?([eE][-+]?[0-9]+)?)(M)?")
_RATIO_RE = re.compile(r"([-+]?[0-9]+)/([0-9]+)")

_NAMED_CHARS = {
	"newline": "\n",
	"space": " ",
	"tab": "\t",
	"backspace": "\b",
	"formfeed": "\f",
	"return": "\r",
}

_STRING_ESCAPES = {
	"t": "\t",
	"r": "\r",
	"n": "\n",
	"\\": "\\",
	'"': '"',
	"b": "\b",
	"f": "\f",
}


class _Splice:
	def __init__(self, items: List[Any]) -> None:
		self.items = items


class FormReader:
	"""Reads forms one at a time from a text stream.

	Keeps a single character of pushback, like a pushback reader, and tracks
	line and column so read errors can point at the offending input.
	"""

	def __init__(
		self,
		stream: TextIO,
		options: Optional[ReaderOptions] = None,
		source: Optional[str] = None,
	) -> None:
		self._stream = stream
		self._options = options or default_reader_options()
		self._source = source
		self._pushback = ""
		self._prev = (1, 0)
		self.line = 1
		self.column = 0

	def __iter__(self) -> Iterator[Any]:
		while True:
			form = self.read()
			if form is EOF:
				return
			yield form

	def read(self, eof: Any = EOF) -> Any:
		"""Read the next top-level form, or return ``eof`` at end of stream."""
		while True:
			try:
				form = self._read_form()
			except RecursionError:
				raise self._error("Form nested too deeply") from None
			if form is EOF:
				return eof
			if form is _NOTHING:
				continue
			if isinstance(form, _Splice):
				raise self._error("Reader conditional splicing not allowed at the top level.")
			return form

	# character level

	def _error(self, message: str) -> ReaderError:
		return ReaderError(message, self._source, self.line, self.column)

	def _read_char(self) -> str:
		if self._pushback:
			ch = self._pushback
			self._pushback = ""
		else:
			try:
				ch = self._stream.read(1)
			except UnicodeDecodeError as exc:
				raise self._error(f"cannot decode input: {exc.reason}") from exc
		self._prev = (self.line, self.column)
		if ch == "\n":
			self.line += 1
			self.column = 0
		elif ch:
			self.column += 1
		return ch

	def _unread(self, ch: str) -> None:
		if ch:
			self._pushback = ch
			self.line, self.column = self._prev

	def _skip_whitespace(self) -> str:
		ch = self._read_char()
		while ch and ch in WHITESPACE:
			ch = self._read_char()
		return ch

	def _skip_line(self) -> None:
		ch = self._read_char()
		while ch and ch not in "\r\n":
			ch = self._read_char()

	def _read_token(self, first: str) -> str:
		chars = [first]
		while True:
			ch = self._read_char()
			if not ch or ch in WHITESPACE or ch in TERMINATORS:
				self._unread(ch)
				return "".join(chars)
			chars.append(ch)

	# form level

	def _read_form(self) -> Any:
		ch = self._skip_whitespace()
		if not ch:
			return EOF
		if ch == ";":
			self._skip_line()
			return _NOTHING
		if ch == "(":
			return ListForm(self._read_delimited(")", "list"))
		if ch == "[":
			return Vector(self._read_delimited("]", "vector"))
		if ch == "{":
			return self._make_map(self._read_delimited("}", "map"))
		if ch in ")]}":
			raise self._error(f"Unmatched delimiter: {ch}")
		if ch == '"':
			return self._read_string()
		if ch == "\\":
			return self._read_char_literal()
		if ch == "'":
			return ListForm((QUOTE, self._read_required("quoted form")))
		if ch == "`":
			return ListForm((SYNTAX_QUOTE, self._read_required("syntax-quoted form")))
		if ch == "~":
			nxt = self._read_char()
			if nxt == "@":
				return ListForm((UNQUOTE_SPLICING, self._read_required("unquoted form")))
			self._unread(nxt)
			return ListForm((UNQUOTE, self._read_required("unquoted form")))
		if ch == "@":
			return ListForm((DEREF, self._read_required("dereferenced form")))
		if ch == "^":
			return self._read_meta()
		if ch == "#":
			return self._read_dispatch()
		token = self._read_token(ch)
		if token[0].isdigit() or (len(token) > 1 and token[0] in "+-" and token[1].isdigit()):
			return self._parse_number(token)
		return self._interpret_token(token)

	def _read_required(self, context: str) -> Any:
		while True:
			form = self._read_form()
			if form is EOF:
				raise self._error(f"EOF while reading {context}")
			if form is _NOTHING:
				continue
			if isinstance(form, _Splice):
				raise self._error(f"Reader conditional splicing not allowed in {context}")
			return form

	def _read_delimited(self, close: str, context: str) -> List[Any]:
		start = self.line
		items: List[Any] = []
		while True:
			ch = self._skip_whitespace()
			if not ch:
				raise self._error(f"EOF while reading {context}, starting at line {start}")
			if ch == close:
				return items
			self._unread(ch)
			form = self._read_form()
			if form is EOF:
				raise self._error(f"EOF while reading {context}, starting at line {start}")
			if form is _NOTHING:
				continue
			if isinstance(form, _Splice):
				items.extend(form.items)
				continue
			items.append(form)

	def _make_map(self, items: List[Any]) -> MapForm:
		if len(items) % 2:
			raise self._error("Map literal must contain an even number of forms")
		try:
			result = MapForm(zip(items[::2], items[1::2]))
		except TypeError as exc:
			raise self._error(f"Unhashable map key: {exc}") from exc
		if len(result) != len(items) // 2:
			raise self._error("Duplicate key in map literal")
		return result

	def _read_string(self) -> str:
		chars: List[str] = []
		while True:
			ch = self._read_char()
			if not ch:
				raise self._error("EOF while reading string")
			if ch == '"':
				return "".join(chars)
			if ch == "\\":
				chars.append(self._read_escape())
			else:
				chars.append(ch)

	def _read_escape(self) -> str:
		ch = self._read_char()
		if not ch:
			raise self._error("EOF while reading string")
		if ch in _STRING_ESCAPES:
			return _STRING_ESCAPES[ch]
		if ch == "u":
			digits = "".join(self._read_char() for _ in range(4))
			try:
				return chr(int(digits, 16))
			except ValueError:
				raise self._error(f"Invalid unicode escape: \\u{digits}") from None
		if ch.isdigit():
			digits = ch
			while len(digits) < 3:
				nxt = self._read_char()
				if nxt and nxt in "01234567":
					digits += nxt
				else:
					self._unread(nxt)
					break
			value = int(digits, 8) if all(d in "01234567" for d in digits) else 256
			if value > 0o377:
				raise self._error("Octal escape sequence must be in range [0, 377].")
			return chr(value)
		raise self._error(f"Unsupported escape character: \\{ch}")

	def _read_char_literal(self) -> Char:
		ch = self._read_char()
		if not ch:
			raise self._error("EOF while reading character")
		token = self._read_token(ch)
		if len(token) == 1:
			return Char(token)
		if token in _NAMED_CHARS:
			return Char(_NAMED_CHARS[token])
		if token.startswith("u") and len(token) == 5:
			try:
				return Char(chr(int(token[1:], 16)))
			except ValueError:
				pass
		elif token.startswith("o") and 2 <= len(token) <= 4:
			try:
				value = int(token[1:], 8)
			except ValueError:
				value = -1
			if 0 <= value <= 0o377:
				return Char(chr(value))
		raise self._error(f"Unsupported character: \\{token}")

	def _parse_number(self, token: str) -> Any:
		m = _INT_RE.fullmatch(token)
		if m:
			sign = -1 if m.group(1) == "-" else 1
			if m.group(2):
				return 0
			if m.group(3):
				return sign * int(m.group(3))
			if m.group(4):
				return sign * int(m.group(4), 16)
			if m.group(5):
				return sign * int(m.group(5), 8)
			if m.group(7):
				try:
					return sign * int(m.group(7), int(m.group(6)))
				except ValueError:
					raise self._error(f"Invalid number: {token}") from None
			raise self._error(f"Invalid number: {token}")
		m = _FLOAT_RE.fullmatch(token)
		if m:
			if m.group(4):
				return Decimal(m.group(1))
			return float(m.group(1))
		m = _RATIO_RE.fullmatch(token)
		if m:
			try:
				return Fraction(int(m.group(1)), int(m.group(2)))
			except ZeroDivisionError:
				raise self._error(f"Divide by zero: {token}") from None
		raise self._error(f"Invalid number: {token}")

	def _interpret_token(self, token: str) -> Any:
		if token == "nil":
			return None
		if token == "true":
			return True
		if token == "false":
			return False
		if token.startswith(":"):
			return self._make_keyword(token)
		return self._make_symbol(token)

	def _split_name(self, token: str, original: str):
		if token == "/":
			return None, "/"
		if token.endswith(":") or "::" in token or not token:
			raise self._error(f"Invalid token: {original}")
		idx = token.find("/")
		if idx == -1:
			return None, token
		if idx == 0 or idx == len(token) - 1 and not token.endswith("//"):
			raise self._error(f"Invalid token: {original}")
		return token[:idx], token[idx + 1:]

	def _make_symbol(self, token: str) -> Symbol:
		namespace, name = self._split_name(token, token)
		return Symbol(name, namespace)

	def _make_keyword(self, token: str) -> Keyword:
		auto = token.startswith("::")
		body = token[2:] if auto else token[1:]
		if not body or body == "/":
			raise self._error(f"Invalid token: {token}")
		namespace, name = self._split_name(body, token)
		return Keyword(name, namespace, auto_resolved=auto)

	def _read_meta(self) -> Any:
		meta_form = self._read_required("metadata")
		if isinstance(meta_form, (Symbol, str)) and not isinstance(meta_form, Char):
			meta = {TAG: meta_form}
		elif isinstance(meta_form, Keyword):
			meta = {meta_form: True}
		elif isinstance(meta_form, dict):
			meta = dict(meta_form)
		else:
			raise self._error("Metadata must be Symbol, Keyword, String or Map")
		target = self._read_required("form with metadata")
		if not isinstance(target, (Symbol, ListForm, Vector, MapForm, SetForm)):
			raise self._error("Metadata can only be applied to symbols and collections")
		return with_meta(target, meta)

	# dispatch macros

	def _read_dispatch(self) -> Any:
		ch = self._read_char()
		if not ch:
			raise self._error("EOF while reading dispatch macro")
		if ch == "{":
			items = self._read_delimited("}", "set")
			try:
				result = SetForm(items)
			except TypeError as exc:
				raise self._error(f"Unhashable set element: {exc}") from exc
			if len(result) != len(items):
				raise self._error("Duplicate key in set literal")
			return result
		if ch == "_":
			self._read_required("discarded form")
			return _NOTHING
		if ch == '"':
			return self._read_regex()
		if ch == "'":
			return ListForm((VAR, self._read_required("var form")))
		if ch == "(":
			return ListForm((FN, ListForm(self._read_delimited(")", "fn literal"))))
		if ch == "?":
			return self._read_conditional()
		if ch == ":":
			return self._read_namespaced_map()
		if ch == "^":
			return self._read_meta()
		if ch == "!":
			self._skip_line()
			return _NOTHING
		if ch == "=":
			raise self._error("Read-eval is not supported")
		if ch == "<":
			raise self._error("Unreadable form")
		if ch.isalpha():
			tag = self._interpret_token(self._read_token(ch))
			if not isinstance(tag, Symbol):
				raise self._error("Reader tag must be a symbol")
			return Tagged(tag, self._read_required(f"tagged literal #{tag}"))
		raise self._error(f"No dispatch macro for: #{ch}")

	def _read_regex(self) -> Regex:
		chars: List[str] = []
		while True:
			ch = self._read_char()
			if not ch:
				raise self._error("EOF while reading regex")
			if ch == '"':
				return Regex("".join(chars))
			chars.append(ch)
			if ch == "\\":
				nxt = self._read_char()
				if not nxt:
					raise self._error("EOF while reading regex")
				chars.append(nxt)

	def _read_conditional(self) -> Any:
		if not self._options.allows_conditionals:
			raise self._error("Conditional read not allowed")
		ch = self._read_char()
		splicing = ch == "@"
		if splicing:
			ch = self._read_char()
		if ch in WHITESPACE:
			ch = self._skip_whitespace()
		if ch != "(":
			raise self._error("read-cond body must be a list")
		items = self._read_delimited(")", "reader conditional")
		if len(items) % 2:
			raise self._error("read-cond requires an even number of forms")
		for feature, form in zip(items[::2], items[1::2]):
			if not isinstance(feature, Keyword):
				raise self._error("Feature should be a keyword")
			if feature.namespace is None and (
				feature.name in self._options.features or feature.name == "default"
			):
				if splicing:
					if not isinstance(form, (ListForm, Vector)):
						raise self._error("Spliced form in read-cond-splicing must be a list or vector")
					return _Splice(list(form))
				return form
		return _NOTHING

	def _read_namespaced_map(self) -> MapForm:
		auto = False
		ch = self._read_char()
		if ch == ":":
			auto = True
			ch = self._read_char()
		prefix: List[str] = []
		while ch and ch not in WHITESPACE and ch != "{":
			prefix.append(ch)
			ch = self._read_char()
		if ch in WHITESPACE:
			ch = self._skip_whitespace()
		if ch != "{":
			raise self._error("Namespaced map must specify a map")
		namespace = "".join(prefix) or None
		if namespace is None and not auto:
			raise self._error("Namespaced map must specify a namespace")
		items = self._read_delimited("}", "namespaced map")
		for i in range(0, len(items), 2):
			key = items[i]
			if isinstance(key, Keyword) and key.namespace is None and not key.auto_resolved:
				items[i] = Keyword(key.name, namespace, auto_resolved=auto)
			elif isinstance(key, Keyword) and key.namespace == "_":
				items[i] = Keyword(key.name)
			elif isinstance(key, Symbol) and key.namespace is None:
				items[i] = Symbol(key.name, namespace, key.meta)
			elif isinstance(key, Symbol) and key.namespace == "_":
				items[i] = Symbol(key.name, None, key.meta)
		return self._make_map(items)


def read_forms(
	stream: TextIO,
	options: Optional[ReaderOptions] = None,
	source: Optional[str] = None,
	ignore_unreadable: bool = True,
) -> Iterator[Any]:
	"""Lazily yield the top-level forms of ``stream``.

	With ``ignore_unreadable`` the first malformed form ends the sequence and
	everything read before it is kept; otherwise the ``ReaderError`` is raised
	to the caller.
	"""
	reader = FormReader(stream, options, source)
	while True:
		try:
			form = reader.read()
		except ReaderError as exc:
			if not ignore_unreadable:
				raise
			logger.debug("stopped reading %s: %s", source or "<stream>", exc)
			return
		if form is EOF:
			return
		yield form
