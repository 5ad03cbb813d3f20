from odoo_toolbox.connection.jsonrpc_adapter import JsonRpcTransport
from odoo_toolbox.connection.protocol import OdooProtocol, OdooSession
