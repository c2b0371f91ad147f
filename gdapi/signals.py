from blinker import Namespace

_gdapi = Namespace()

schema_loaded = _gdapi.signal('schema-loaded')

before_request = _gdapi.signal('before-request')

after_request = _gdapi.signal('after-request')

client_closed = _gdapi.signal('client-closed')
