"""Data-access objects for clouds, kubeconfigs, users, roles, menus and audit events."""