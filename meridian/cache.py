"""
# Identity preserving registry of zones.

# &Registry holds weak references to the zones it constructs. While any
# reference to a zone remains, retrieving its key again produces the same
# object. Once the last reference is released, the entry is dropped and a
# later retrieval constructs a new object.
"""
import logging
import threading
import weakref

log = logging.getLogger(__name__)

class Registry(object):
	"""
	# Keyed registry of weakly referenced objects.

	# [ Properties ]
	# /load/
		# The callable used to construct the object of a missing key.
		# Exceptions raised by it propagate and nothing is registered.
	"""

	def __init__(self, load):
		self.load = load
		self._objects = weakref.WeakValueDictionary()
		self._lock = threading.Lock()

	def __repr__(self):
		return '<%s[%d]>' %(self.__class__.__name__, len(self))

	def __len__(self):
		with self._lock:
			return len(self._objects)

	def __contains__(self, key):
		with self._lock:
			return self._objects.get(key) is not None

	def get(self, key):
		"""
		# Get the object registered for &key, constructing and registering
		# it when there is none.
		"""
		with self._lock:
			ob = self._objects.get(key)
		if ob is not None:
			return ob

		log.debug("constructing %r", key)
		created = self.load(key)

		# Insert if absent; concurrent constructions of the same key
		# resolve to the first registered object.
		with self._lock:
			ob = self._objects.get(key)
			if ob is None:
				self._objects[key] = created
				return created

		log.debug("discarding duplicate construction of %r", key)
		return ob

	def clear(self, keys=None):
		"""
		# Forget the objects of &keys, or all objects when &keys is &None.
		# Existing references are unaffected.
		"""
		with self._lock:
			if keys is None:
				self._objects.clear()
			else:
				for k in keys:
					self._objects.pop(k, None)
		log.debug("cleared %s", 'all entries' if keys is None else keys)
