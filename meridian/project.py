identity = 'http://fault.io/project/python/meridian'
name = 'meridian'
abstract = 'Time zone transition tables, offset resolution, and zone data search paths.'
icon = '🌐'
study = 'horology'

controller = 'fault.io'
contact = 'mailto:critical@fault.io'

version_info = (0, 1, 0)
version = '.'.join(map(str, version_info))
