DEFAULT_INPUT_FILE = "audiofile.wav"
DEFAULT_CHUNK_MINUTES = 10
DEFAULT_OUTPUT_PREFIX = "audiofile_part"
DEFAULT_OUTPUT_DIR = "audio_chunks"

DEFAULT_PACKET_FRAMES = 1152

OUTPUT_EXTENSION = "wav"
INDEX_WIDTH = 3
