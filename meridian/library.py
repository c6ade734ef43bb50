"""
# Primary public module.

# Provides access to zones by key and the search path used to find them.

#!syntax/python
	from meridian import library as tzlib
	ny = tzlib.zone('America/New_York')
	assert ny is tzlib.zone('America/New_York')

# [ Elements ]
# /configuration/
	# The process' &.tzpath.Configuration.
# /registry/
	# The &.cache.Registry holding the zones constructed by &zone.
"""
import os
import os.path

from . import cache
from . import sources
from . import tzpath
from . import views
from .types import NotFoundError

Zone = views.Zone

localtime = '/etc/localtime'
tzenviron = 'TZ'

configuration = tzpath.Configuration()

def load(key:str, configuration=configuration) -> Zone:
	"""
	# Construct a new &Zone for &key from the first provider of &configuration holding it.
	"""
	data = sources.find(configuration.providers(), key)
	return Zone.from_bytes(data, key)

registry = cache.Registry(load)

def zone(key:str) -> Zone:
	"""
	# Return the Zone object for &key.

	# While a returned zone is referenced, subsequent calls with the same key
	# return the same object.
	"""
	sources.validate(key)
	return registry.get(key)

def fresh(key:str) -> Zone:
	"""
	# Construct a new Zone object for &key bypassing the cache.
	"""
	return load(key)

def from_bytes(data, key:str=None) -> Zone:
	"""
	# Construct a new Zone from TZif &data with the optional display &key.
	# The cache is neither consulted nor updated.
	"""
	return Zone.from_bytes(bytes(data), key)

def available():
	"""
	# The set of keys held by the providers of the current search path.
	"""
	return sources.available(configuration.providers())

def reset(paths=None):
	"""
	# Replace the search path, or restore the default when &paths is &None.
	# Zones already constructed, cached or not, are not affected.
	"""
	return configuration.set(paths)

def clear(keys=None):
	"""
	# Drop the registry entries of &keys, or all entries.
	"""
	registry.clear(keys)

def local(environ=None) -> Zone:
	"""
	# Return the zone of the process.

	# The `TZ` environment variable is consulted first; a key is retrieved with &zone,
	# and an absolute path, optionally prefixed with a colon, is read directly.
	# Otherwise, `/etc/localtime` is read and the key is inferred from its link target
	# when possible.
	"""
	if environ is None:
		environ = os.environ

	tz = environ.get(tzenviron)
	if tz:
		if tz.startswith(':'):
			tz = tz[1:]
		if not os.path.isabs(tz):
			return zone(tz)
		path = tz
	else:
		path = localtime

	try:
		with open(path, 'rb') as f:
			data = f.read()
	except FileNotFoundError as err:
		raise NotFoundError("no time zone data at %r" %(path,)) from err

	return from_bytes(data, key=linked_key(path))

def linked_key(path:str):
	"""
	# Identify the key of a link into a `zoneinfo` directory; &None if &path
	# is not such a link.
	"""
	if not os.path.islink(path):
		return None

	parts = os.readlink(path).split('/')
	if 'zoneinfo' in parts:
		idx = len(parts) - 1 - parts[::-1].index('zoneinfo')
		key = '/'.join(parts[idx+1:])
		return key or None
	return None
