"""
# Print the transitions of the zones named by the arguments.

# When no keys are given, the zone of the process is printed.
"""
import sys
from .. import library
from .. import views
from ..types import Error

def print_zone_transitions(keys, write=None):
	if write is None:
		write = sys.stdout.write

	if keys:
		zones = [library.zone(x) for x in keys]
	else:
		zones = [library.local()]

	for z in zones:
		write("%s: %s\n" %(z, z.default))
		for transition, offset in z.table.transitions:
			write("%s: %s\n" %(views.iso(transition), offset))

def main(argv=None):
	if argv is None:
		argv = sys.argv

	try:
		print_zone_transitions(argv[1:])
	except Error as err:
		sys.stderr.write(str(err) + '\n')
		return 1
	return 0

if __name__ == '__main__':
	sys.exit(main())
