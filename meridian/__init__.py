"""
[ About ]
---------

meridian resolves UTC offsets for IANA time zones. Zone data is read from
TZif files found on a search path, or from the `tzdata` distribution when no
directory holds the requested key, and parsed into immutable transition
tables.

&.library will be referred to as `tzlib` throughout the examples in this documentation.

#!/pl/python
	from meridian import library as tzlib

[ Zones ]
---------

Zones are retrieved by key. While a zone is referenced, retrieving the same key
produces the same object:

#!/pl/python
	ny = tzlib.zone('America/New_York')
	assert ny is tzlib.zone('America/New_York')

Zones that must not be shared are constructed with &.library.fresh, and zones
of arbitrary TZif data with &.library.from_bytes:

#!/pl/python
	with open('/etc/localtime', 'rb') as f:
		lz = tzlib.from_bytes(f.read(), key='localtime')

[ Offsets ]
-----------

The offset of an instant, UNIX time in seconds:

#!/pl/python
	offset = ny.find(1583046000)
	print(offset.utc_offset, offset.abbreviation, offset.is_dst)

The offset of a wall clock time. Repeated local times select the first
occurrence unless `later` is given, and skipped local times select the
offset in effect after the skip:

#!/pl/python
	import datetime
	first = ny.local(datetime.datetime(2020, 11, 1, 1, 30))
	second = ny.local(datetime.datetime(2020, 11, 1, 1, 30), later=True)
	assert first.is_dst and not second.is_dst

Zones are &datetime.tzinfo instances:

#!/pl/python
	dt = datetime.datetime(2020, 3, 8, 12, tzinfo=ny)
	print(dt.utcoffset(), dt.tzname())

[ Search Path ]
---------------

The directories searched for zone data are replaced with &.library.reset.
Zones constructed before the change are unaffected.

#!/pl/python
	tzlib.reset(['/opt/zoneinfo'])
	tzlib.reset() # restore the default
"""
