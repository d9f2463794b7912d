"""
Core Constants

Centralized configuration values for the application.
"""

# =============================================================================
# Roles
# =============================================================================

ROLE_ADMIN = 'admin'
ROLE_COACH = 'coach'
ROLE_PARTICIPANT = 'participant'
ROLE_ECOMMERCE = 'ecommerce'
ROLE_FINANCE = 'finance'

APP_ROLES = [ROLE_ADMIN, ROLE_COACH, ROLE_PARTICIPANT, ROLE_ECOMMERCE, ROLE_FINANCE]

STAFF_ROLES = [ROLE_ADMIN, ROLE_COACH, ROLE_ECOMMERCE, ROLE_FINANCE]

# Stage names that are owned by a specific staff role
FEES_STAGE_NAME = 'Fees Paid'
ECOMMERCE_STAGE_NAME = 'E-Commerce Setup'

# The fee stage is also looked up by position in the journey
FEES_STAGE_ORDER = 2

# =============================================================================
# Journey targets used by the participant dashboard
# =============================================================================

DASHBOARD_TARGETS = {
    'total_stages': 11,
    'total_tasks': 32,
    'total_documents': 6,
    'attendance_days': 30,
}

# Required document types per participant, used for the analytics denominator
REQUIRED_DOCUMENTS_PER_PARTICIPANT = 6

DOCUMENT_TYPES = ['iec', 'gst', 'rcmc', 'udyam_aadhar', 'shop_act', 'pan_card', 'other']

ECOMMERCE_PLATFORMS = ['amazon', 'flipkart', 'own_website', 'shopify', 'indiamart', 'other']

SESSION_TYPES = ['offline_orientation', 'online_orientation', 'special_session', 'ohm_meet']

DEFAULT_CURRENCY = 'INR'

# =============================================================================
# Pages and navigation
# =============================================================================

# Roles allowed on each gated page; pages not listed are open to every role
PAGE_ACCESS = {
    '/analytics': [ROLE_ADMIN, ROLE_COACH],
    '/coach': [ROLE_ADMIN, ROLE_COACH],
    '/admin': [ROLE_ADMIN],
    '/ecommerce': [ROLE_ADMIN, ROLE_COACH, ROLE_ECOMMERCE],
    '/finance': [ROLE_ADMIN, ROLE_FINANCE],
}

# System pages in menu order: (path, label key, icon)
SYSTEM_PAGES = [
    ('/dashboard', 'sidebar.dashboard', 'LayoutDashboard'),
    ('/journey', 'sidebar.myJourney', 'Route'),
    ('/tasks', 'sidebar.tasks', 'CheckSquare'),
    ('/documents', 'sidebar.documents', 'FileText'),
    ('/attendance', 'sidebar.attendance', 'Calendar'),
    ('/trades', 'sidebar.tradeUpdates', 'TrendingUp'),
    ('/coach', 'sidebar.verification', 'Users'),
    ('/ecommerce', 'sidebar.ecommerce', 'Store'),
    ('/finance', 'sidebar.finance', 'DollarSign'),
    ('/analytics', 'sidebar.analytics', 'BarChart3'),
    ('/admin', 'sidebar.adminPanel', 'Shield'),
]

# Label keys and icons for system pages, used when a role has no stored rows
PAGE_META = {path: (label_key, icon) for path, label_key, icon in SYSTEM_PAGES}

FALLBACK_NAVIGATION = {
    ROLE_PARTICIPANT: ['/dashboard', '/journey', '/tasks', '/documents', '/attendance', '/trades'],
    ROLE_COACH: ['/coach', '/analytics'],
    ROLE_ADMIN: [
        '/journey', '/tasks', '/documents', '/attendance', '/trades',
        '/coach', '/ecommerce', '/finance', '/analytics', '/admin',
    ],
    ROLE_ECOMMERCE: ['/ecommerce'],
    ROLE_FINANCE: ['/finance'],
}

# Fallback menus that show a page with a different icon than its catalog entry
FALLBACK_ICONS = {
    (ROLE_COACH, '/coach'): 'CheckSquare',
}

FALLBACK_DEFAULT_PAGE = {
    ROLE_PARTICIPANT: '/dashboard',
    ROLE_COACH: '/coach',
    ROLE_ADMIN: '/journey',
    ROLE_ECOMMERCE: '/ecommerce',
    ROLE_FINANCE: '/finance',
}

# Pagination defaults
PAGINATION = {
    'default_limit': 50,
    'max_limit': 500,
}

# Audit log listing cap
AUDIT_LOG_LIMIT = 100
