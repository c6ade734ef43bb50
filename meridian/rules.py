"""
# POSIX TZ rule strings as found in the footer of version 2+ TZif data.

# Slim TZif data omits the transitions that the footer rule implies. &expand
# produces those transitions through &horizon so that a &.types.Table holds
# them explicitly; &window produces the transitions surrounding later years
# on demand.

#!syntax/python
	rule = rules.parse('EST5EDT,M3.2.0,M11.1.0')
	assert rule.std.utc_offset == -5 * 3600
	assert rule.dst.utc_offset == -4 * 3600

# [ Elements ]
# /horizon/
	# The last year for which transitions are stored by &.tzif.structure.
"""
import re
import calendar
import datetime
import collections

from .types import Offset, FormatError

horizon = 2037
epoch = datetime.date(1970, 1, 1).toordinal()
day = 86400

rule = collections.namedtuple('rule', ('std', 'dst', 'start', 'end'))
date = collections.namedtuple('date', ('form', 'fields', 'time'))

_name = r'(?:<[A-Za-z0-9+\-]+>|[A-Za-z]+)'
_offset = r'[+-]?\d{1,3}(?::\d{1,2}){0,2}'
_date = r'(?:J\d{1,3}|\d{1,3}|M\d{1,2}\.\d\.\d)(?:/' + _offset + r')?'

_pattern = re.compile(
	r'(?P<std>' + _name + r')(?P<stdoff>' + _offset + r')'
	r'(?:(?P<dst>' + _name + r')(?P<dstoff>' + _offset + r')?'
	r'(?:,(?P<start>' + _date + r'),(?P<end>' + _date + r'))?)?$'
)

def seconds(string:str, limit=167) -> int:
	"""
	# Convert a `[+-]hh[:mm[:ss]]` string into a signed count of seconds.
	# Hours beyond &limit are rejected.
	"""
	sign = 1
	if string[:1] in ('+', '-'):
		if string[0] == '-':
			sign = -1
		string = string[1:]

	fields = [int(x) for x in string.split(':')]
	fields.extend([0] * (3 - len(fields)))
	h, m, s = fields
	if h > limit or m > 59 or s > 59:
		raise FormatError("invalid time %r in rule" %(string,))
	return sign * (h * 3600 + m * 60 + s)

def parse_date(string:str) -> date:
	"""
	# Parse the date and optional time of a rule boundary. The time defaults to 02:00.
	"""
	spec, _, time = string.partition('/')
	time = seconds(time) if time else 7200

	if spec[0] == 'J':
		n = int(spec[1:])
		if not 1 <= n <= 365:
			raise FormatError("Julian day %d is out of range" %(n,))
		return date('J', (n,), time)
	elif spec[0] == 'M':
		m, w, d = map(int, spec[1:].split('.'))
		if not (1 <= m <= 12 and 1 <= w <= 5 and 0 <= d <= 6):
			raise FormatError("invalid month rule %r" %(spec,))
		return date('M', (m, w, d), time)
	else:
		n = int(spec)
		if not 0 <= n <= 365:
			raise FormatError("zero-based day %d is out of range" %(n,))
		return date('n', (n,), time)

def parse(string:str, construct=Offset.of) -> rule:
	"""
	# Parse a POSIX TZ rule string.

	# Returns &None for an empty string. &construct is used to build
	# the &Offset instances so that callers can share them with their tables.

	# [ Parameters ]
	# /string/
		# The rule; `std offset [dst [offset] [,start[/time],end[/time]]]`.
	# /construct/
		# Callable taking `(utc_offset, is_dst, abbreviation)`.
	"""
	if not string:
		return None

	m = _pattern.match(string)
	if m is None:
		raise FormatError("invalid TZ rule %r" %(string,))

	# POSIX offsets are positive west of Greenwich.
	stdoff = -seconds(m.group('stdoff'), 24)
	std = construct(stdoff, False, m.group('std').strip('<>'))

	if m.group('dst') is None:
		return rule(std, None, None, None)

	if m.group('start') is None:
		raise FormatError("TZ rule %r names a DST designator without transition dates" %(string,))

	if m.group('dstoff') is not None:
		dstoff = -seconds(m.group('dstoff'), 24)
	else:
		dstoff = stdoff + 3600
	dst = construct(dstoff, True, m.group('dst').strip('<>'))

	return rule(std, dst, parse_date(m.group('start')), parse_date(m.group('end')))

def day_of_year(year:int, d:date) -> int:
	"""
	# The days since the UNIX epoch of the local date that &d designates in &year.
	"""
	jan1 = datetime.date(year, 1, 1).toordinal() - epoch

	if d.form == 'J':
		n, = d.fields
		# February 29th is never counted.
		if calendar.isleap(year) and n >= 60:
			n += 1
		return jan1 + n - 1
	elif d.form == 'n':
		n, = d.fields
		return jan1 + n
	else:
		m, w, wd = d.fields
		first = datetime.date(year, m, 1)
		# date.weekday() counts from Monday; rules count from Sunday.
		first_wd = (first.weekday() + 1) % 7
		mday = 1 + (wd - first_wd) % 7 + (w - 1) * 7
		mdays = calendar.monthrange(year, m)[1]
		while mday > mdays:
			mday -= 7
		return first.toordinal() - epoch + mday - 1

def year_of(instant:int) -> int:
	ordinal = epoch + instant // day
	ordinal = max(1, min(ordinal, datetime.date.max.toordinal()))
	return datetime.date.fromordinal(ordinal).year

def transitions(r:rule, year:int):
	"""
	# The two transitions of &r in &year in ascending order.
	"""
	start = day_of_year(year, r.start) * day + r.start.time - r.std.utc_offset
	end = day_of_year(year, r.end) * day + r.end.time - r.dst.utc_offset
	return sorted([(start, r.dst), (end, r.std)], key=(lambda x: x[0]))

def expand(r:rule, after, current:Offset, horizon=horizon, first=None):
	"""
	# Produce the `(at, offset)` pairs implied by &r strictly after &after
	# through the end of the year &horizon.

	# Pairs that would not change the offset in effect are omitted. When two
	# produced transitions share an instant, the later one in rule order wins.

	# [ Parameters ]
	# /r/
		# The &rule returned by &parse.
	# /after/
		# The instant of the last explicit transition; &None when there are none.
	# /current/
		# The &Offset in effect at &after; &None when unknown.
	# /first/
		# The first year to produce transitions for. Defaults to the year
		# of &after, or 1970.
	"""
	if r is None or r.dst is None:
		return []

	if first is None:
		first = 1970 if after is None else year_of(after)
	if first > horizon:
		return []

	events = []
	for year in range(first, horizon + 1):
		events.extend(transitions(r, year))
	events.sort(key=(lambda x: x[0]))

	out = []
	for at, offset in events:
		if after is not None and at <= after:
			continue

		if out and out[-1][0] == at:
			out.pop()

		previous = out[-1][1] if out else current
		if previous is None or offset != previous:
			out.append((at, offset))

	return out

def window(r:rule, year:int, span=2):
	"""
	# The transitions of &r for the years within &span of &year.

	# Returns the &Offset in effect before the first transition and the
	# `(at, offset)` pairs; used to resolve times following the last
	# transition of a table.
	"""
	first = max(datetime.MINYEAR, year - span)
	last = min(datetime.MAXYEAR, year + span)
	events = expand(r, None, None, horizon=last, first=first)
	initial = r.std if events[0][1] == r.dst else r.dst
	return initial, events
