"""
Tables de paramètres du moteur.

Les modules ``*_params`` chargent et valident leurs JSON au premier import ;
les constantes simples sont déclarées directement en Python.
"""
