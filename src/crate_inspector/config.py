"""Default configuration settings for the crate-inspector tool."""

DEFAULT_CONFIG = {
	# How rustdoc JSON is produced
	"build": {
		# Toolchain passed to cargo as +<toolchain>; JSON output needs nightly
		"toolchain": "nightly",
		# Cargo manifest of the crate to document
		"manifest_path": "Cargo.toml",
		# Package to document in a workspace (None for the manifest's own package)
		"package": None,
		# Cargo features to enable
		"features": [],
		"all_features": False,
		"no_default_features": False,
		# Target triple (None for the host)
		"target": None,
		# Cargo target directory (None to ask cargo metadata)
		"target_dir": None,
		# Include private items in the output
		"document_private_items": False,
		# Pass --quiet to cargo
		"quiet": True,
	},
	# How type expressions are rendered
	"render": {
		# Dialect used when none is given on the command line
		"dialect": "native",
		# Maximum type nesting depth before rendering gives up
		"max_depth": 128,
		# Custom dialects: name -> fields, optionally with a 'base' built-in dialect
		"dialects": {},
	},
}
