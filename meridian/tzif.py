"""
# Read TZif, time zone information, data(zic output).

# The data is decoded into a &.types.Table; the input buffer is not referenced
# by the result. See tzfile(5) or RFC 8536 for the layout.

# [ Elements ]
# /unpack/
	# Decode the fields of the preferred data block.
# /structure/
	# Build a &.types.Table from the fields produced by &unpack.
# /parse/
	# Composition of &unpack and &structure.
"""
import struct
import collections
import functools

from . import rules
from .types import Offset, Table, FormatError

magic = b'TZif'
versions = {
	b'\x00': 1,
	b'2': 2,
	b'3': 3,
	b'4': 4,
}

header_fields = (
	'tzh_ttisutcnt',   # The number of UT/local indicators stored in the file.
	'tzh_ttisstdcnt',  # The number of standard/wall indicators stored in the file.
	'tzh_leapcnt',     # The number of leap seconds for which data is stored in the file.
	'tzh_timecnt',     # The number of ``transition times'' for which data is stored in the file.
	'tzh_typecnt',     # The number of ``local time types'' for which data is stored in the file (must not be zero).
	'tzh_charcnt',     # The number of characters of ``time zone abbreviation strings'' stored in the file.
)
tzinfo_header = collections.namedtuple('tzinfo_header', header_fields)
header_struct = struct.Struct("!4sc15x" + (len(header_fields) * "l"))

ttinfo_fields = (
	'tt_utoff',
	'tt_isdst',
	'tt_desigidx',
)
tzinfo_ttinfo = collections.namedtuple('tzinfo_ttinfo', ttinfo_fields)
ttinfo_struct = struct.Struct("!lBB")

# Transition time and leap occurrence codes by block.
time_codes = {
	1: ('l', 4),
	2: ('q', 8),
}

tzdata = collections.namedtuple('tzdata', (
	'version',
	'transtimes',
	'types',
	'timeinfo',
	'leaps',
	'isstd',
	'isut',
	'footer',
))

def read_header(data, position):
	"""
	# Read and validate the header at &position.

	# Returns the version number and the &tzinfo_header.
	"""
	if len(data) - position < header_struct.size:
		raise FormatError("truncated header at byte %d" %(position,))

	ident, version, *counts = header_struct.unpack_from(data, position)
	if ident != magic:
		raise FormatError("not a TZif file: magic is %r" %(ident,))
	if version not in versions:
		raise FormatError("unrecognized TZif version %r" %(version,))

	header = tzinfo_header(*counts)
	for field, count in zip(header_fields, header):
		if count < 0:
			raise FormatError("negative count in %s: %d" %(field, count))

	if header.tzh_typecnt == 0:
		raise FormatError("no local time types")
	if header.tzh_ttisstdcnt not in (0, header.tzh_typecnt):
		raise FormatError("standard/wall indicator count does not match the type count")
	if header.tzh_ttisutcnt not in (0, header.tzh_typecnt):
		raise FormatError("UT/local indicator count does not match the type count")

	return versions[version], header

def block_size(header, timesize):
	"""
	# The number of bytes following a header of a block using &timesize transition times.
	"""
	return (
		header.tzh_timecnt * timesize
		+ header.tzh_timecnt
		+ header.tzh_typecnt * ttinfo_struct.size
		+ header.tzh_charcnt
		+ header.tzh_leapcnt * (timesize + 4)
		+ header.tzh_ttisstdcnt
		+ header.tzh_ttisutcnt
	)

def read_block(data, position, header, block):
	"""
	# Decode the data block following a header.

	# Returns the fields of the block and the position following it.
	"""
	code, timesize = time_codes[block]
	end = position + block_size(header, timesize)
	if end > len(data):
		raise FormatError("data block needs %d bytes, but only %d are available" %(
			end - position, len(data) - position
		))

	n = header.tzh_timecnt
	transtimes = struct.unpack_from("!%d%s" %(n, code), data, position)
	position += n * timesize

	# unsigned char's
	types = tuple(bytes(data[position:position+n]))
	position += n

	timetypinfo = []
	for i in range(header.tzh_typecnt):
		timetypinfo.append(tzinfo_ttinfo(*ttinfo_struct.unpack_from(data, position)))
		position += ttinfo_struct.size

	abbr = bytes(data[position:position+header.tzh_charcnt])
	position += header.tzh_charcnt

	leaps = []
	for i in range(header.tzh_leapcnt):
		leaps.append(struct.unpack_from("!%sl" %(code,), data, position))
		position += timesize + 4

	isstd = tuple(bytes(data[position:position+header.tzh_ttisstdcnt]))
	position += header.tzh_ttisstdcnt

	isut = tuple(bytes(data[position:position+header.tzh_ttisutcnt]))
	position += header.tzh_ttisutcnt

	for i, x in enumerate(types):
		if x >= header.tzh_typecnt:
			raise FormatError("transition %d refers to missing local time type %d" %(i, x))

	for i, x in enumerate(timetypinfo):
		if x.tt_desigidx >= header.tzh_charcnt:
			raise FormatError("local time type %d designator index %d is out of bounds" %(i, x.tt_desigidx))
		if x.tt_isdst not in (0, 1):
			raise FormatError("local time type %d has an invalid DST flag" %(i,))

	##
	# Resolve the designators. Append a NUL terminator to the
	# string to guarantee that abbr.find() will not return -1.
	abbr += b'\0'
	try:
		timeinfo = tuple([
			(abbr[x.tt_desigidx:abbr.find(b'\0', x.tt_desigidx)].decode('ascii'), x.tt_utoff, x.tt_isdst)
			for x in timetypinfo
		])
	except UnicodeDecodeError as err:
		raise FormatError("designator is not ASCII") from err

	return (transtimes, types, timeinfo, tuple(leaps), isstd, isut), position

def read_footer(data, position):
	"""
	# Read the newline enclosed TZ string following a version 2+ data block.
	"""
	if bytes(data[position:position+1]) != b'\n':
		raise FormatError("footer does not begin with a newline")

	end = bytes(data[position+1:]).find(b'\n')
	if end == -1:
		raise FormatError("footer does not end with a newline")

	try:
		return bytes(data[position+1:position+1+end]).decode('ascii')
	except UnicodeDecodeError as err:
		raise FormatError("footer is not ASCII") from err

def unpack(data) -> tzdata:
	"""
	# Given TZif data, identify the appropriate version and unpack the timezone information.

	# Version 2 and later data is read from the second, 64-bit, block; the
	# legacy block is validated and skipped.
	"""
	data = memoryview(data)
	version, header = read_header(data, 0)
	position = header_struct.size

	if version == 1:
		fields, position = read_block(data, position, header, 1)
		footer = None
	else:
		skip = block_size(header, 4)
		if position + skip > len(data):
			raise FormatError("truncated version 1 data block")
		position += skip

		version, header = read_header(data, position)
		if version == 1:
			raise FormatError("second header does not declare version 2 or later")
		fields, position = read_block(data, position + header_struct.size, header, 2)
		footer = read_footer(data, position)

	return tzdata(version, *fields, footer)

def structure(tzd:tzdata, lru_cache=functools.lru_cache) -> Table:
	"""
	# Given the fields from &unpack, make the &.types.Table.

	# Transitions implied by the footer rule are appended to the explicit
	# transitions through &.rules.horizon. Rules with daylight savings are
	# retained by the table for times beyond that.
	"""
	# Re-use prior created offsets.
	zb = lru_cache(maxsize=None)(Offset.of)

	ltt = [zb(utoff, bool(isdst), abbrev) for (abbrev, utoff, isdst) in tzd.timeinfo]
	transitions = list(zip(tzd.transtimes, map(ltt.__getitem__, tzd.types)))

	rule = None
	if tzd.footer:
		rule = rules.parse(tzd.footer, construct=zb)
		if transitions:
			after, current = transitions[-1]
		else:
			after, current = None, ltt[0]
		transitions.extend(rules.expand(rule, after, current))
		if rule.dst is None:
			rule = None

	return Table.create(transitions, ltt[0], tzd.leaps, tzd.footer, rule)

def parse(data) -> Table:
	"""
	# Parse TZif &data into a &.types.Table.

	# Raises &.types.FormatError when the data is malformed.
	"""
	return structure(unpack(data))

def abbreviations(table:Table):
	"""
	# Yield the distinct designators used by &table.
	"""
	seen = set()
	for x in table.records:
		if x.abbreviation not in seen:
			seen.add(x.abbreviation)
			yield x.abbreviation
