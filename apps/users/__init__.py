"""Users app package.

Front desk staff accounts. Authentication uses Django's built-in user
model; each staff member gets a ``StaffProfile`` carrying the role and a
contact phone. Register and login endpoints hand out SimpleJWT tokens
that the reservation API accepts as bearer credentials.
"""
