# Configuration for the command-line export script

# Radius (meters) used when none is given on the command line
RADIUS = 1000

# Name of the reference point in the output filename
REFERENCE_NAME = "punct"

# Output directory
OUTPUT_DIR = "output"
