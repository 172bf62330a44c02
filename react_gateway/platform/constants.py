SERVICE_NAME = "react-gateway"
