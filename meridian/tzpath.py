"""
# Search path configuration for zone data.

# A &Configuration holds an immutable snapshot of absolute directory roots.
# The snapshot is replaced wholesale by &Configuration.set; readers always see
# either the prior or the new snapshot.

# [ Environment ]
# /`MERIDIAN_TZPATH`/
	# Replaces the platform default roots.
# /`MERIDIAN_TZPATH_APPEND`/
	# Roots searched after the platform defaults; ignored when
	# `MERIDIAN_TZPATH` is set.

# Both are delimited by &os.pathsep.
"""
import os
import os.path
import logging
import threading

from . import sources

log = logging.getLogger(__name__)

environ_override = 'MERIDIAN_TZPATH'
environ_append = 'MERIDIAN_TZPATH_APPEND'
fallback = 'tzdata.zoneinfo'

if os.name == 'nt':
	defaults = ()
else:
	defaults = (
		'/usr/share/zoneinfo',
		'/usr/lib/zoneinfo',
		'/usr/share/lib/zoneinfo',
		'/etc/zoneinfo',
	)

def split(string:str, separator=os.pathsep):
	"""
	# Split a search path string; empty fields are dropped.
	"""
	return tuple(x for x in string.split(separator) if x)

def compute(environ):
	"""
	# Construct the default search path from the &environ mapping.

	# Relative entries are logged and dropped.
	"""
	override = environ.get(environ_override)
	if override is not None:
		paths = split(override)
	else:
		paths = defaults + split(environ.get(environ_append, ''))

	accepted = []
	for x in paths:
		if not os.path.isabs(x):
			log.warning("ignoring relative search path entry %r", x)
			continue
		accepted.append(x)

	return tuple(accepted)

def check(paths):
	"""
	# Validate an explicitly given search path.
	"""
	if isinstance(paths, (str, bytes)):
		raise TypeError("search path must be a sequence of strings, not a single %s" %(type(paths).__name__,))

	paths = tuple(paths)
	for x in paths:
		if not os.path.isabs(x):
			raise ValueError("search path entries must be absolute: %r" %(x,))
	return paths

class Configuration(object):
	"""
	# Atomically swappable search path.

	# [ Properties ]
	# /environ/
		# The mapping consulted when computing the default path.
	# /fallback/
		# The name of the package searched after all directories;
		# &None to disable.
	"""

	def __init__(self, environ=None, fallback=fallback):
		self.environ = os.environ if environ is None else environ
		self.fallback = fallback
		self._lock = threading.Lock()
		self._snapshot = compute(self.environ)

	def __repr__(self):
		return '<%s %r>' %(self.__class__.__name__, self._snapshot)

	def get(self):
		"""
		# The current search path snapshot.
		"""
		return self._snapshot

	def set(self, paths=None):
		"""
		# Replace the search path with &paths, or restore the computed default
		# when &paths is &None. Previously constructed zones are unaffected.
		"""
		if paths is None:
			snapshot = compute(self.environ)
		else:
			snapshot = check(paths)

		with self._lock:
			self._snapshot = snapshot
		log.debug("search path set to %r", snapshot)
		return snapshot

	def providers(self):
		"""
		# Construct the providers for the current snapshot.
		"""
		snapshot = self._snapshot
		providers = [sources.Directory(x) for x in snapshot]
		if self.fallback is not None:
			providers.append(sources.Package(self.fallback))
		return tuple(providers)
