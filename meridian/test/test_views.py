import datetime
import pickle

import pytest

from .. import tzif
from .. import views
from ..types import Offset, Table, Transition, AmbiguousQueryError
from . import tzifdata

est = Offset.of(-18000, False, 'EST')
edt = Offset.of(-14400, True, 'EDT')

# Local times of the eastern fixture.
fold_start = 1604192400 # 2020-11-01T01:00:00
fold_stop = 1604196000 # 2020-11-01T02:00:00
gap_start = 1583632800 # 2020-03-08T02:00:00
gap_stop = 1583636400 # 2020-03-08T03:00:00

@pytest.fixture
def table():
	return tzif.parse(tzifdata.eastern())

@pytest.fixture
def zone(table):
	return views.Zone(table, 'Test/Eastern')

def test_round_trip():
	data = tzifdata.build(tzifdata.eastern_types, [(1583046000, 1)])
	table = tzif.parse(data)

	assert views.find(table, 1583046000 - 1) == est
	assert views.find(table, 1583046000) == edt

def test_find(table):
	assert views.find(table, -2**63) == est
	assert views.find(table, 1583650800 - 1) == est
	assert views.find(table, 1583650800) == edt
	assert views.find(table, 1604210400 - 1) == edt
	assert views.find(table, 1604210400) == est
	assert views.find(table, 2**63 - 1) == est

def test_find_piecewise_constant(table):
	# Changes only occur at transitions.
	previous = views.find(table, 1583650800 - 3600 * 24 * 30)
	changes = []
	for instant in range(1583650800 - 3600 * 24 * 30, 1604210400 + 3600 * 24 * 30, 1800):
		current = views.find(table, instant)
		if current is not previous:
			changes.append(instant)
		previous = current
	assert changes == [1583650800, 1604210400]

def test_find_without_transitions():
	table = tzif.parse(tzifdata.build([(3600, False, 'CET')]))
	for x in (-2**63, 0, 2**63 - 1):
		assert views.find(table, x) == Offset.of(3600, False, 'CET')
		assert views.local(table, x) == Offset.of(3600, False, 'CET')

def test_local_unambiguous(table):
	assert views.local(table, gap_start - 1) == est
	assert views.local(table, gap_stop) == edt
	assert views.local(table, fold_start - 1) == edt
	assert views.local(table, fold_stop) == est
	assert views.local(table, fold_stop, later=True) == est

def test_local_fold(table):
	for local in (fold_start, fold_start + 1800, fold_stop - 1):
		assert views.local(table, local) == edt
		assert views.local(table, local, later=False) == edt
		assert views.local(table, local, later=True) == est

def test_local_gap(table):
	for local in (gap_start, gap_start + 1800, gap_stop - 1):
		assert views.local(table, local) == edt
		assert views.local(table, local, later=True) == edt

def test_local_gap_instant(table):
	# Gap times designate instants preceding the transition.
	local = gap_start + 1800
	offset = views.local(table, local)
	assert local - offset.utc_offset < 1583650800

def test_local_consistency(table):
	# Away from folds and gaps, the selected offset maps back to the local time.
	for instant in range(1583650800 - 86400, 1604210400 + 86400, 900):
		offset = views.find(table, instant)
		local = instant + offset.utc_offset
		if fold_start <= local < fold_stop:
			continue
		assert views.local(table, local) is offset

def test_local_close_transitions():
	# Two transitions an hour apart with offsets changing by two hours.
	a = Offset.of(0, False, 'A')
	b = Offset.of(7200, True, 'B')
	c = Offset.of(-3600, False, 'C')
	table = Table.create([(10000, b), (13600, c)], a)

	assert views.local(table, 9999) is a
	# Only observed after the second transition.
	assert views.local(table, 11000) is c
	# Observed during B and again after the second transition.
	assert views.local(table, 18000) is b
	assert views.local(table, 18000, later=True) is c
	assert views.local(table, 20800) is c

def test_local_inconsistent_table():
	o = Offset.of(0, False, 'O')
	a = Offset.of(500, False, 'A')
	b = Offset.of(5000, False, 'B')
	table = Table(
		(Transition(1000, a), Transition(2000, b)), o, (o, a, b), (), None,
		(1000, 2000), ((0, 9000), (5000, 9000)),
	)
	with pytest.raises(AmbiguousQueryError):
		views.local(table, 3000)

def test_zone_datetimes(zone):
	summer = datetime.datetime(2020, 7, 1, tzinfo=datetime.timezone.utc)
	assert zone.find(summer) == edt
	assert zone.find(datetime.datetime(2020, 12, 1)) == est
	assert zone.local(datetime.datetime(2020, 11, 1, 1, 30)) == edt
	assert zone.local(datetime.datetime(2020, 11, 1, 1, 30), later=True) == est
	assert zone.local(datetime.datetime(2020, 3, 8, 2, 30)) == edt

def test_zone_tzinfo(zone):
	dt = datetime.datetime(2020, 7, 1, 12, tzinfo=zone)
	assert dt.utcoffset() == datetime.timedelta(hours=-4)
	assert dt.dst() == datetime.timedelta(hours=1)
	assert dt.tzname() == 'EDT'

	dt = datetime.datetime(2020, 12, 1, 12, tzinfo=zone)
	assert dt.utcoffset() == datetime.timedelta(hours=-5)
	assert dt.dst() == datetime.timedelta(0)
	assert dt.tzname() == 'EST'

	assert zone.utcoffset(None) is None
	assert zone.tzname(None) is None

def test_zone_tzinfo_fold(zone):
	first = datetime.datetime(2020, 11, 1, 1, 30, tzinfo=zone)
	second = first.replace(fold=1)
	assert first.tzname() == 'EDT'
	assert second.tzname() == 'EST'
	assert second.timestamp() - first.timestamp() == 3600

def test_zone_fromutc(zone):
	utc = datetime.timezone.utc
	first = datetime.datetime(2020, 11, 1, 5, 30, tzinfo=utc).astimezone(zone)
	second = datetime.datetime(2020, 11, 1, 6, 30, tzinfo=utc).astimezone(zone)

	assert (first.hour, first.minute, first.fold) == (1, 30, 0)
	assert (second.hour, second.minute, second.fold) == (1, 30, 1)
	assert first.tzname() == 'EDT'
	assert second.tzname() == 'EST'

	summer = datetime.datetime(2020, 7, 1, 16, tzinfo=utc).astimezone(zone)
	assert (summer.hour, summer.fold) == (12, 0)

	with pytest.raises(ValueError):
		zone.fromutc(datetime.datetime(2020, 1, 1, tzinfo=utc))

def test_zone_identity_arithmetic(zone, table):
	# datetime compares zones by identity.
	other = views.Zone(table, 'Test/Eastern')
	a = datetime.datetime(2020, 11, 1, 1, 30, tzinfo=zone)
	b = datetime.datetime(2020, 11, 1, 1, 30, fold=1, tzinfo=zone)
	c = datetime.datetime(2020, 11, 1, 1, 30, fold=1, tzinfo=other)

	assert b - a == datetime.timedelta(0)
	assert c - a == datetime.timedelta(hours=1)

def test_zone_slice(zone):
	assert list(zone.slice(1583650800 - 1, 1604210400)) == [
		(1583650800, edt),
		(1604210400, est),
	]
	assert list(zone.slice(1590000000, 1600000000)) == [(1583650800, edt)]

def test_zone_localize_normalize(zone):
	local, offset = zone.localize(1604210400)
	assert offset == est
	assert local == fold_start

	before = local - 1
	n_local, n_offset = zone.normalize(offset, before)
	assert n_offset == edt
	assert n_local == fold_stop - 1

	assert zone.normalize(offset, local) == (local, offset)

def test_zone_properties(zone, table):
	assert zone.default == est
	assert zone.transitions == (1583650800, 1604210400)
	assert zone.offsets == (edt, est)
	assert zone.leaps == ()
	assert str(zone) == 'Test/Eastern'
	assert repr(zone) == '<Zone: Test/Eastern[2/2]>'
	assert str(views.Zone(table)) == '<Zone: None[2/2]>'

def test_zone_pickle(zone):
	restored = pickle.loads(pickle.dumps(zone))
	assert restored is not zone
	assert restored.key == zone.key
	assert restored.table == zone.table
	assert restored.find(1583650800) == edt

def test_daylight_savings():
	cst = Offset.of(-21600, False, 'CST')
	cdt = Offset.of(-18000, True, 'CDT')
	# Double daylight time relative to standard.
	cddt = Offset.of(-14400, True, 'CDDT')
	table = Table.create([(100, cdt), (200, cddt), (300, cst)], cdt)
	assert views.daylight(table) == (3600, 3600, 7200, 0)

def test_iso():
	assert views.iso(0) == '1970-01-01T00:00:00'
	assert views.iso(-2**59) == str(-2**59)

@pytest.fixture
def ruled():
	return tzif.parse(tzifdata.eastern(footer='EST5EDT,M3.2.0,M11.1.0'))

def local_seconds(*fields):
	return views.seconds(datetime.datetime(*fields))

def test_rule_after_transitions(ruled):
	summer = local_seconds(2040, 7, 1, 16)
	assert summer > ruled.points[-1]

	assert views.find(ruled, summer) == edt
	assert views.find(ruled, local_seconds(2040, 12, 1, 17)) == est
	assert views.find(ruled, local_seconds(2100, 7, 1)) == edt
	assert views.find(ruled, 2**63 - 1) == est

	# 2040-03-11T07:00:00Z
	start = local_seconds(2040, 3, 11, 7)
	assert views.find(ruled, start - 1) == est
	assert views.find(ruled, start) == edt

def test_rule_local_after_transitions(ruled):
	assert views.local(ruled, local_seconds(2040, 7, 1, 12)) == edt
	assert views.local(ruled, local_seconds(2040, 12, 1, 12)) == est

	fold = local_seconds(2040, 11, 4, 1, 30)
	assert views.local(ruled, fold) == edt
	assert views.local(ruled, fold, later=True) == est

	gap = local_seconds(2040, 3, 11, 2, 30)
	assert views.local(ruled, gap) == edt
	assert views.local(ruled, gap, later=True) == edt

def test_rule_zone_after_transitions(ruled):
	z = views.Zone(ruled, 'Test/Eastern')
	summer = datetime.datetime(2040, 7, 1, 12, tzinfo=z)
	assert summer.tzname() == 'EDT'
	assert summer.utcoffset() == datetime.timedelta(hours=-4)
	assert summer.dst() == datetime.timedelta(hours=1)

	winter = datetime.datetime(2040, 12, 1, 12, tzinfo=z)
	assert winter.tzname() == 'EST'
	assert winter.dst() == datetime.timedelta(0)

	utc = datetime.timezone.utc
	first = datetime.datetime(2040, 11, 4, 5, 30, tzinfo=utc).astimezone(z)
	second = datetime.datetime(2040, 11, 4, 6, 30, tzinfo=utc).astimezone(z)
	assert (first.hour, first.minute, first.fold, first.tzname()) == (1, 30, 0, 'EDT')
	assert (second.hour, second.minute, second.fold, second.tzname()) == (1, 30, 1, 'EST')

	restored = pickle.loads(pickle.dumps(z))
	assert restored.table.rule == ruled.rule
	assert restored.find(local_seconds(2040, 7, 1, 16)) == edt

def test_fixed_rule_not_retained():
	table = tzif.parse(tzifdata.build([(3600, False, 'CET')], footer='CET-1'))
	assert table.rule is None
	assert table.footer == 'CET-1'
	assert views.find(table, local_seconds(2040, 7, 1)).abbreviation == 'CET'

def test_offset_comparison():
	assert est != None
	assert not (est == None)
	assert est != 0
	assert est == (-18000, 'EST', 'std')
	assert est != edt
