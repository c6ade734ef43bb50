"""
# Access to timezone views for adjusting timestamps in and out of local forms.

# Instants are integer seconds since the UNIX epoch. Local times are integer
# seconds since 1970-01-01T00:00:00 as read from a wall clock in the zone.

# Usage:

#!syntax/python
	from meridian import tzif, views
	z = views.Zone(tzif.parse(data), "America/New_York")
	edt = z.find(1583046000)
	est = z.local(1604209500, later=True)

# [ Local Time Resolution ]

# Local times within a fold, a repeated interval caused by a decrease in
# offset, select the offset before the transition unless `later` is given.

# Local times within a gap, an interval skipped by an increase in offset,
# always select the offset following the transition; the local time is read as
# if it had been shifted forward by the size of the gap. For a transition at
# `T` from `O1` to `O2`, the local time `L` in `[T+O1, T+O2)` resolves to `O2`
# and designates the instant `L-O2`, which precedes `T`.

# Times following the last transition of a table with a footer rule are
# resolved against the rule's transitions for the surrounding years.
"""
import bisect
import datetime

from . import rules
from . import tzif
from .types import Table, Offset, AmbiguousQueryError

epoch = datetime.datetime(1970, 1, 1)
second = datetime.timedelta(seconds=1)

def seconds(dt:datetime.datetime) -> int:
	"""
	# Seconds since the epoch of the calendar fields of &dt; &datetime.datetime.tzinfo is ignored.
	"""
	return (dt.replace(tzinfo=None) - epoch) // second

def instant(dt:datetime.datetime) -> int:
	"""
	# The UNIX time of &dt. Naive datetimes are presumed to be UTC.
	"""
	offset = dt.utcoffset()
	if offset is None:
		return seconds(dt)
	return seconds(dt) - (offset // second)

def iso(value:int) -> str:
	"""
	# ISO-8601 representation of the seconds &value, or its decimal form
	# when it is outside the range of &datetime.
	"""
	try:
		return (epoch + datetime.timedelta(seconds=value)).isoformat()
	except OverflowError:
		return str(value)

def extended(table:Table, value:int, bounds) -> Table:
	"""
	# Select the table to search for &value.

	# When &value is beyond the last of &bounds and &table has a footer rule,
	# a table of the rule's transitions in the surrounding years is returned.
	# Otherwise, &table itself.

	# [ Parameters ]
	# /table/
		# The table of the zone.
	# /value/
		# The instant or local time being resolved.
	# /bounds/
		# &Table.points for instants, or the latest wall times for local times.
	"""
	if table.rule is None or not bounds or value <= bounds[-1]:
		return table

	initial, events = rules.window(table.rule, rules.year_of(value))
	return Table.create(events, initial)

def find(table:Table, instant:int) -> Offset:
	"""
	# Get the appropriate offset in the zone for the given UNIX time, &instant.
	# If &instant precedes the first transition, the initial offset is returned.
	"""
	table = extended(table, instant, table.points)
	return table.offset_at(table.index(instant))

def locate(table:Table, local:int, later:bool=False, search=bisect.bisect_right) -> int:
	"""
	# Identify the transition whose offset applies to the &local time.

	# Returns the index of the transition, or `-1` for the initial offset.

	# [ Parameters ]
	# /table/
		# The transitions to search.
	# /local/
		# The wall clock time in seconds.
	# /later/
		# Whether to select the second occurrence of a repeated local time.
	"""
	early, late = table.walls
	points = table.points

	# Transitions before i0 have been passed by any reading of &local;
	# transitions at or after i1 have not been reached by any reading.
	i0 = search(late, local)
	i1 = search(early, local)
	if i0 == i1:
		return i0 - 1

	last = len(points) - 1
	candidates = []
	for j in range(i0 - 1, i1):
		utc = local - table.offset_at(j).utc_offset
		if j >= 0 and utc < points[j]:
			continue
		if j < last and utc >= points[j+1]:
			continue
		candidates.append(j)

	if candidates:
		# Fold or unambiguous.
		return candidates[-1] if later else candidates[0]

	# Gap; the first offset whose wall clock begins after &local.
	for j in range(i0, i1):
		if points[j] + table.offset_at(j).utc_offset > local:
			return j

	raise AmbiguousQueryError(
		"local time %d is inconsistent with transitions %d through %d" %(local, i0, i1 - 1)
	)

def local(table:Table, local:int, later:bool=False) -> Offset:
	"""
	# Get the offset of the wall clock time &local.

	# [ Parameters ]
	# /table/
		# The transitions to search.
	# /local/
		# The wall clock time in seconds.
	# /later/
		# Whether to select the second occurrence of a repeated local time.
		# Ignored for unambiguous and skipped local times.
	"""
	table = extended(table, local, table.walls[1])
	return table.offset_at(locate(table, local, later))

def daylight(table:Table):
	"""
	# The savings of each offset in effect indexed by transition, offset by one
	# for the initial offset. Savings are measured against the nearest
	# preceding standard offset, or the following one when none precedes.
	"""
	records = (table.initial,) + tuple(x.offset for x in table.transitions)
	std = [None] * len(records)

	standard = None
	for i, x in enumerate(records):
		if not x.is_dst:
			standard = x
		std[i] = standard

	standard = None
	for i in range(len(records) - 1, -1, -1):
		if not records[i].is_dst:
			standard = records[i]
		elif std[i] is None:
			std[i] = standard

	return tuple(
		x.utc_offset - s.utc_offset if x.is_dst and s is not None else 0
		for x, s in zip(records, std)
	)

class Zone(datetime.tzinfo):
	"""
	# An ordered sequence of transition times whose ranges correspond to a
	# particular offset.

	# Zones are &datetime.tzinfo implementations; &datetime compares and
	# subtracts timestamps of the same zone using the identity of the zone,
	# so zone instances should be retrieved through &.library.zone.

	# [ Properties ]
	# /key/
		# The name the zone was constructed with; &None when unnamed.
	# /table/
		# The &.types.Table of the zone.
	"""

	Offset = Offset

	def __init__(self, table:Table, key:str=None):
		self.table = table
		self.key = key
		self._savings = daylight(table)

	@classmethod
	def from_bytes(Class, data, key:str=None):
		"""
		# Construct a Zone from TZif &data.
		"""
		return Class(tzif.parse(data), key)

	@property
	def transitions(self):
		return self.table.points

	@property
	def offsets(self):
		return tuple(x.offset for x in self.table.transitions)

	@property
	def default(self) -> Offset:
		"""
		# The &Offset in effect before the first transition.
		"""
		return self.table.initial

	@property
	def leaps(self):
		return self.table.leaps

	def __repr__(self):
		return '<%s: %s[%d/%d]>' %(
			self.__class__.__name__,
			self.key,
			len(self.table.transitions),
			len(self.table.records),
		)

	def __str__(self):
		if self.key is None:
			return repr(self)
		return self.key

	def __reduce__(self):
		# The table is carried as the source of the key may differ on load.
		return (restore, (self.key, self.table))

	def find(self, pit) -> Offset:
		"""
		# Get the appropriate offset in the zone for a given Point In Time, &pit.
		# If the &pit precedes the first transition, the &default will be returned.

		# [ Parameters ]
		# /pit/
			# UNIX time in seconds or a &datetime.datetime.
		"""
		if isinstance(pit, datetime.datetime):
			pit = instant(pit)
		return find(self.table, pit)

	def local(self, pit, later:bool=False) -> Offset:
		"""
		# Get the offset of a wall clock time in the zone.

		# [ Parameters ]
		# /pit/
			# Local seconds or a naive &datetime.datetime.
		# /later/
			# Select the second occurrence of a repeated local time.
		"""
		if isinstance(pit, datetime.datetime):
			pit = seconds(pit)
		return local(self.table, pit, later)

	def slice(self, start:int, stop:int, search=bisect.bisect_right):
		"""
		# Get a slice of transition points and time zone offsets
		# relative to a given &start and &stop.

		# Returns an iterable of `(at, offset)` pairs beginning with the
		# transition in effect at &start and including those through &stop.
		"""
		points = self.table.points
		first = max(0, search(points, start) - 1)
		last = search(points, stop)

		return iter(self.table.transitions[first:last])

	def localize(self, pit:int):
		"""
		# Given &pit, return the local time according to the zone's transitions
		# along with the &Offset used.
		"""
		offset = self.find(pit)
		return (pit + offset.utc_offset, offset)

	def normalize(self, offset:Offset, pit:int):
		"""
		# This function should be used in cases where adjustments are being made to
		# an already zoned point in time. Once the adjustments are complete, the point should be
		# normalized in order to properly represent the local point.

		# If no change is necessary, the exact, given &pit will be returned.

		# Returns the re-localized &pit and its new &Offset in a tuple.

		# [ Parameters ]
		# /offset/
			# The offset of the &pit.
		# /pit/
			# The localized point in time to normalize.
		"""
		p = pit - offset.utc_offset

		new_offset = self.find(p)
		# Using 'is' because it is possible for offsets to be equal, but different.
		if offset is new_offset:
			# no adjustment necessary
			return (pit, offset)
		return (p + new_offset.utc_offset, new_offset)

	# datetime.tzinfo

	def _select(self, dt):
		# The table and index of the transition applicable to &dt.
		wall = seconds(dt)
		table = extended(self.table, wall, self.table.walls[1])
		return table, locate(table, wall, bool(dt.fold))

	def utcoffset(self, dt):
		if dt is None:
			return None
		table, idx = self._select(dt)
		return datetime.timedelta(seconds=table.offset_at(idx).utc_offset)

	def dst(self, dt):
		if dt is None:
			return None
		table, idx = self._select(dt)
		if table is self.table:
			savings = self._savings
		else:
			savings = daylight(table)
		return datetime.timedelta(seconds=savings[idx + 1])

	def tzname(self, dt):
		if dt is None:
			return None
		table, idx = self._select(dt)
		return table.offset_at(idx).abbreviation

	def fromutc(self, dt):
		if not isinstance(dt, datetime.datetime):
			raise TypeError("fromutc() requires a datetime argument")
		if dt.tzinfo is not self:
			raise ValueError("dt.tzinfo is not self")

		offset = find(self.table, seconds(dt))
		wall = dt + datetime.timedelta(seconds=offset.utc_offset)

		# The second occurrence of a repeated local time.
		if local(self.table, seconds(wall)) != offset:
			wall = wall.replace(fold=1)
		return wall

def restore(key, table):
	"""
	# Reconstruct a pickled &Zone. The result is never cached.
	"""
	return Zone(table, key)
