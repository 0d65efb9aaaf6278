"""Default configuration settings for the githashprop tool."""

DEFAULT_CONFIG = {
	# Resolution settings
	"resolver": {
		# Name of the property receiving the commit hash (blank means "git_hash")
		"property_name": "git_hash",
		# Text placed before the hash
		"property_prefix": "",
		# Text placed after the hash
		"property_suffix": "",
		# Truncate a hash read from the repository to 7 characters
		"short_hash": False,
		# Value used when the hash cannot be read (None leaves the property unset)
		"fallback_value": None,
		# Name of the property receiving the branch name (None skips the branch)
		"branch_property_name": None,
		# Value used when no branch name can be derived
		"fallback_branch_value": None,
	},
	# Output settings for the resolve command
	"output": {
		# Output format: 'properties', 'env' or 'json'
		"format": "properties",
	},
}
