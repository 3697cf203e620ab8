from api.views.user_handlers import (
    claim_username as claim_username,
)
from api.views.user_handlers import (
    my_account as my_account,
)
from api.views.user_handlers import (
    user_info as user_info,
)
