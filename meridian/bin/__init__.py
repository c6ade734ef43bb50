"""
# Executables of the package.

# /&.zone/
	# Print the transitions of zones.
"""
