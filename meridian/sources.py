"""
# Zone data providers and the ordered search across them.

# Providers implement `load(parts)` returning the TZif data of a validated key,
# or &None when they do not hold it, and `keys()` iterating over the keys they hold.

# [ Elements ]
# /Directory/
	# Provider reading keys as nested paths beneath a root directory.
# /Package/
	# Provider reading keys from the resources of an installed package.
# /find/
	# Search a sequence of providers for the data of a key.
"""
import os
import os.path
import logging
import importlib.resources

from . import tzif
from .types import InvalidKeyError, NotFoundError

log = logging.getLogger(__name__)

def validate(key:str):
	"""
	# Split &key into its path segments rejecting those that could leave
	# the root of a provider.

	# Raises &.types.InvalidKeyError when the key is not permitted.
	"""
	if not isinstance(key, str):
		raise InvalidKeyError("zone key must be a string, not %s" %(type(key).__name__,))
	if not key:
		raise InvalidKeyError("zone key is empty")
	if '\x00' in key or '\\' in key:
		raise InvalidKeyError("zone key %r contains a disallowed character" %(key,))
	if key.startswith('/') or os.path.isabs(key):
		raise InvalidKeyError("zone key %r is an absolute path" %(key,))

	parts = key.split('/')
	for x in parts:
		if x in ('', '.', '..'):
			raise InvalidKeyError("zone key %r contains the segment %r" %(key, x))

	return parts

class Directory(object):
	"""
	# Zone data beneath a file system directory such as `/usr/share/zoneinfo`.
	"""

	def __init__(self, root:str):
		self.root = os.path.normpath(root)

	def __repr__(self):
		return '%s(%r)' %(self.__class__.__name__, self.root)

	def path(self, parts, _join=os.path.join, _normpath=os.path.normpath):
		"""
		# The file path of the key &parts; &None if it would resolve outside of &root.
		"""
		p = _normpath(_join(self.root, *parts))
		if os.path.commonpath([self.root, p]) != self.root:
			return None
		return p

	def load(self, parts):
		"""
		# Read the data of &parts; &None when the file is missing or does not
		# begin with the TZif magic.
		"""
		p = self.path(parts)
		if p is None:
			return None

		try:
			with open(p, 'rb') as f:
				data = f.read()
		except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
			return None

		if data[:len(tzif.magic)] != tzif.magic:
			log.debug("ignoring %r; not TZif data", p)
			return None
		return data

	def keys(self, _join=os.path.join):
		"""
		# Yield the keys of all files beneath &root that begin with the TZif magic.
		"""
		prefixlen = len(self.root) + 1
		for dirpath, dirnames, filenames in os.walk(self.root):
			dirnames.sort()
			for x in sorted(filenames):
				p = _join(dirpath, x)
				try:
					with open(p, 'rb') as f:
						if f.read(len(tzif.magic)) != tzif.magic:
							continue
				except OSError:
					continue
				yield p[prefixlen:].replace(os.sep, '/')

class Package(object):
	"""
	# Zone data held as resources of a package; normally the `tzdata` distribution.
	"""

	def __init__(self, name:str='tzdata.zoneinfo'):
		self.name = name

	def __repr__(self):
		return '%s(%r)' %(self.__class__.__name__, self.name)

	def load(self, parts):
		package = '.'.join([self.name] + parts[:-1])
		try:
			return importlib.resources.files(package).joinpath(parts[-1]).read_bytes()
		except (ImportError, FileNotFoundError, IsADirectoryError, NotADirectoryError, UnicodeEncodeError):
			return None

	def keys(self):
		"""
		# Yield the keys listed by the package's `zones` index.
		"""
		container = self.name.rpartition('.')[0] or self.name
		try:
			index = importlib.resources.files(container).joinpath('zones').read_text(encoding='utf-8')
		except (ImportError, FileNotFoundError):
			return

		for x in index.splitlines():
			x = x.strip()
			if x:
				yield x

def find(providers, key:str) -> bytes:
	"""
	# Get the data of &key from the first provider that holds it.

	# [ Parameters ]
	# /providers/
		# The providers to query in order.
	# /key/
		# The zone key; validated before any provider is queried.
	"""
	parts = validate(key)

	for p in tuple(providers):
		data = p.load(parts)
		if data is not None:
			log.debug("found %r in %r", key, p)
			return data

	raise NotFoundError("no time zone found with key %r" %(key,))

def available(providers):
	"""
	# The set of keys held by any of the &providers.
	"""
	keys = set()
	for p in tuple(providers):
		keys.update(p.keys())
	return keys
