"""Configuration key names and literal values understood by the SpeechEngine SDK.

These strings are the wire contract with the backend; they must not be
renamed or reformatted.
"""

# Environment
KEY_ENGINE_NAME = "engine_name"
KEY_LOG_LEVEL = "log_level"
KEY_APP_ID = "appid"
KEY_UID = "uid"
KEY_RECORDER_TYPE = "recorder_type"

ENGINE_NAME_ASR = "ASR"
RECORDER_TYPE_RECORDER = "Recorder"
LOG_LEVEL_DEBUG = "DEBUG"
LOG_LEVEL_WARN = "WARN"

# Protocol
KEY_ASR_ADDRESS = "asr_address"
KEY_ASR_URI = "asr_uri"
KEY_APP_TOKEN = "app_token"
KEY_ASR_CLUSTER = "asr_cluster"
KEY_RESOURCE_ID = "resource_id"
KEY_PROTOCOL_TYPE = "protocol_type"
KEY_MODEL_NAME = "model_name"

BEARER_PREFIX = "Bearer;"
FORCED_MODEL_NAME = "bigmodel"

# Behaviour
KEY_ENABLE_ITN = "asr_enable_itn"
KEY_SHOW_PUNC = "asr_show_nlu_punc"
KEY_ENABLE_DDC = "asr_enable_ddc"
KEY_AUTO_STOP = "asr_auto_stop"
KEY_VAD_TAIL_SILENCE = "asr_vad_tail_silence_threshold"
KEY_RESULT_TYPE = "asr_result_type"

RESULT_TYPE_SINGLE = "single"  # incremental streaming results

# Result codes returned by init()
RESULT_OK = 0
