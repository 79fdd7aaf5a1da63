from venue_booking.routes import admin, auth, bookings, dashboard, payments, support, venues

routers = [
    auth.router,
    dashboard.router,
    venues.router,
    bookings.router,
    payments.router,
    support.router,
    admin.router,
]
