"""
# Data types shared by the parser, the resolver, and the zone sources.

# [ Elements ]

# /Offset/
	# A UTC offset, its designator, and whether it is daylight savings time.
# /Transition/
	# The instant, in UNIX seconds, after which an &Offset applies.
# /Table/
	# The immutable transition table of a zone.
# /Error/
	# Base class of all exceptions raised by the package.
"""
import bisect
import collections
import dataclasses
import typing

class Error(Exception):
	"""
	# Base class for the exceptions raised by &meridian.
	"""

class FormatError(Error, ValueError):
	"""
	# Zone data was truncated, malformed, or otherwise inconsistent.
	"""

class InvalidKeyError(Error, ValueError):
	"""
	# A zone key contained an absolute path, a parent directory reference,
	# or some other segment that is not permitted.
	"""

class NotFoundError(Error, KeyError):
	"""
	# None of the consulted sources held the requested key.
	"""

	def __str__(self):
		# KeyError quotes its argument.
		return Exception.__str__(self)

class AmbiguousQueryError(Error, RuntimeError):
	"""
	# A local time could not be classified against the transitions of a table.
	# Only raised when the table's invariants have been violated.
	"""

class Offset(tuple):
	"""
	# Offsets are constructed by a tuple of the form: `(utc_offset, abbreviation, type)`.
	# Primarily, the type signifies whether or not the offset is daylight
	# savings or not.

	# &Offset instances are usually extracted from &Table objects which
	# hold a sequence of transitions for subsequent searching.
	"""
	__slots__ = ()

	@property
	def utc_offset(self) -> int:
		"""
		# The offset in seconds from UTC.
		"""
		return self[0]

	@property
	def abbreviation(self) -> str:
		"""
		# The Offset's timezone abbreviation; such as UTC, GMT, and EST.
		"""
		return self[1]

	@property
	def type(self) -> str:
		"""
		# Field used to identify if the &Offset is daylight savings time.
		"""
		return self[2]

	@property
	def is_dst(self) -> bool:
		"""
		# Whether or not the &Offset is referring to a daylight savings time
		# offset.
		"""
		return self.type == 'dst'

	def __hash__(self):
		return self[0].__hash__()

	def __str__(self):
		return '%s%s%d' %(
			self.abbreviation,
			"+" if self.utc_offset >= 0 else "-",
			abs(self.utc_offset)
		)

	def __repr__(self):
		return '<%s(%s: %d)>' %(self.__class__.__name__, self.abbreviation, self.utc_offset)

	def __eq__(self, ob):
		if not isinstance(ob, tuple):
			return NotImplemented
		return tuple(self) == tuple(ob)

	def __ne__(self, ob):
		r = self.__eq__(ob)
		if r is NotImplemented:
			return r
		return not r

	def __int__(self):
		return self.utc_offset

	def __reduce__(self):
		return (self.__class__, (tuple(self),))

	@classmethod
	def of(Class, utc_offset:int, is_dst:bool, abbreviation:str):
		"""
		# Construct an &Offset from the fields of a local time type record.
		"""
		return Class((utc_offset, abbreviation, 'dst' if is_dst else 'std'))

Transition = collections.namedtuple('Transition', ('at', 'offset'))

@dataclasses.dataclass(eq=True, frozen=True)
class Table(object):
	"""
	# The transitions of a zone and the &Offset applicable before the first.

	# Tables are built by &create which validates the transition order
	# and derives the search indexes used by &.views.

	# [ Properties ]
	# /transitions/
		# The &Transition sequence in ascending order of `at`.
	# /initial/
		# The &Offset applicable before the first transition, or for all time
		# when there are no transitions.
	# /records/
		# The distinct &Offset instances referenced by &initial and &transitions.
	# /leaps/
		# The leap second records of the data as `(occurrence, correction)` pairs.
	# /footer/
		# The POSIX TZ rule string that followed the data, if any.
	# /points/
		# The `at` field of each transition; used for searching instants.
	# /rule/
		# The parsed footer rule governing instants after the last transition;
		# &None when the data has no footer or the rule is fixed.
	# /walls/
		# Pairs of sequences holding the earliest and latest local time at which
		# each transition can be observed; used for searching local times.
	"""

	transitions: typing.Tuple[Transition, ...]
	initial: Offset
	records: typing.Tuple[Offset, ...]
	leaps: typing.Tuple[typing.Tuple[int, int], ...]
	footer: typing.Optional[str]
	points: typing.Tuple[int, ...] = dataclasses.field(repr=False)
	walls: typing.Tuple[typing.Tuple[int, ...], typing.Tuple[int, ...]] = dataclasses.field(repr=False)
	rule: typing.Optional[tuple] = dataclasses.field(default=None, repr=False)

	@classmethod
	def create(Class, transitions, initial, leaps=(), footer=None, rule=None):
		"""
		# Construct a &Table from an iterable of `(at, offset)` pairs.

		# Raises &FormatError when the transitions are not strictly increasing.
		"""
		transitions = tuple(Transition(at, offset) for at, offset in transitions)
		points = tuple(x.at for x in transitions)

		for i in range(1, len(points)):
			if points[i] <= points[i-1]:
				raise FormatError(
					"transition %d at %d does not follow %d" %(i, points[i], points[i-1])
				)

		records = [initial]
		for x in transitions:
			if x.offset not in records:
				records.append(x.offset)

		early = []
		late = []
		before = initial
		for at, after in transitions:
			ob = before.utc_offset
			oa = after.utc_offset
			early.append(at + min(ob, oa))
			late.append(at + max(ob, oa))
			before = after

		# Both sequences must be sorted for bisection; transitions closer
		# together than their offset change would otherwise break the order.
		for i in range(len(late) - 2, -1, -1):
			if early[i] > early[i+1]:
				early[i] = early[i+1]
		for i in range(1, len(late)):
			if late[i] < late[i-1]:
				late[i] = late[i-1]

		return Class(
			transitions, initial, tuple(records),
			tuple(leaps), footer,
			points, (tuple(early), tuple(late)), rule,
		)

	def offset_at(self, index:int) -> Offset:
		"""
		# The &Offset in effect after the transition at &index; &initial when negative.
		"""
		if index < 0:
			return self.initial
		return self.transitions[index].offset

	def index(self, instant:int, search=bisect.bisect_right) -> int:
		"""
		# The index of the last transition at or before &instant; `-1` if none.
		"""
		return search(self.points, instant) - 1
