# __init__.py
from jobboard.schemas.forms import FormOutcome, LoginForm, RegisterForm
from jobboard.schemas.profile import AccountType, CompanyProfile, JobPosting, UserProfile
from jobboard.schemas.ui import NavState, SessionRead, TransientMessage, UIState

__all__ = [
	"FormOutcome",
	"LoginForm",
	"RegisterForm",
	"AccountType",
	"CompanyProfile",
	"JobPosting",
	"UserProfile",
	"NavState",
	"SessionRead",
	"TransientMessage",
	"UIState",
]
