# POS Order Service
