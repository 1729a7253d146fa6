"""
Package: delivery
Description: Event delivery mechanisms for the Flying Events client.

Provides the request executor, the failsafe endpoint and the retry
loop that coordinates them across transient failures.
"""
